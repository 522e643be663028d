"""Settings, tolerances and the per-update projection context."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Sequence, Tuple

from cubeproj.geom import clamp, point

logger = logging.getLogger(__name__)

LINEAR_SHAPES = ("square", "circle")
VERTEX_MAPPINGS = ("postel", "arcs")


class ConfigError(ValueError):
    """Raised for unusable configuration data."""


@dataclass(frozen=True)
class Sampling:
    """Segment-count policy for one family of sampled curves.

    A curve gets ``base`` segments, more if its physical length divided
    by ``max_segment_length`` is larger, and never more than ``cap``.
    """

    base: int
    cap: int
    max_segment_length: float = 0.5

    def segments(self, length: float) -> int:
        wanted = max(self.base, math.ceil(length / self.max_segment_length))
        return min(wanted, self.cap)


@dataclass(frozen=True)
class ProjectionConfig:
    """Static settings shared by every update."""

    cube_size: float = 4.0
    default_radius: float = 6.0
    radius_range: Tuple[float, float] = (1.0, 15.0)
    default_viewpoint: Tuple[float, float, float] = (0.0, 2.0, 8.0)

    # fractions of the hemispherical boundary radius
    boundary_tolerance: float = 0.01
    center_tolerance: float = 0.01

    determinant_tolerance: float = 0.01
    ray_epsilon: float = 0.001
    ray_length: float = 30.0

    arc_sampling: Sampling = field(default_factory=lambda: Sampling(64, 256))
    edge_sampling: Sampling = field(default_factory=lambda: Sampling(32, 128))
    guide_sampling: Sampling = field(default_factory=lambda: Sampling(64, 1024))
    circle_sampling: Sampling = field(default_factory=lambda: Sampling(256, 1024))

    def clamp_radius(self, radius: float) -> float:
        lo, hi = self.radius_range
        return clamp(radius, lo, hi)


DEFAULT_CONFIG = ProjectionConfig()


@dataclass(frozen=True)
class Toggles:
    """Display switches that change what an update produces."""

    show_guides: bool = True
    show_rays: bool = False
    show_construction: bool = False
    linear_shape: str = "square"
    vertex_mapping: str = "postel"

    def __post_init__(self) -> None:
        if self.linear_shape not in LINEAR_SHAPES:
            raise ValueError(f"unknown linear boundary shape: {self.linear_shape!r}")
        if self.vertex_mapping not in VERTEX_MAPPINGS:
            raise ValueError(f"unknown vertex mapping: {self.vertex_mapping!r}")


@dataclass(frozen=True)
class ProjectionContext:
    """Everything an update needs besides the cube: where the eye is,
    how large the projection surfaces are, and what to produce.

    The viewpoint is also the centre of the hemisphere.
    """

    viewpoint: list
    radius: float
    toggles: Toggles = field(default_factory=Toggles)

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError(f"projection radius must be positive, got {self.radius}")

    @classmethod
    def create(
        cls,
        viewpoint: Sequence[float] | None = None,
        radius: float | None = None,
        config: ProjectionConfig = DEFAULT_CONFIG,
        **toggles: Any,
    ) -> "ProjectionContext":
        """Build a context, filling defaults from ``config`` and clamping
        the radius into the configured range."""

        vp = point(list(viewpoint if viewpoint is not None else config.default_viewpoint))
        r = config.default_radius if radius is None else radius
        clamped = config.clamp_radius(r)
        if clamped != r:
            logger.debug("radius %s clamped to %s", r, clamped)
        return cls(viewpoint=vp, radius=clamped, toggles=Toggles(**toggles))

    def with_viewpoint(self, viewpoint: Sequence[float]) -> "ProjectionContext":
        return replace(self, viewpoint=point(list(viewpoint)))

    def with_radius(self, radius: float,
                    config: ProjectionConfig = DEFAULT_CONFIG) -> "ProjectionContext":
        """Copy with a new radius, clamped into the configured range as
        :meth:`create` does."""

        return replace(self, radius=config.clamp_radius(radius))

    def fingerprint(self) -> tuple:
        return (tuple(self.viewpoint[:3]), self.radius, self.toggles)


_SAMPLING_FIELDS = ("arc_sampling", "edge_sampling", "guide_sampling", "circle_sampling")


def config_from_dict(data: Dict[str, Any]) -> ProjectionConfig:
    """Build a :class:`ProjectionConfig` from a plain mapping of overrides."""

    known = {f.name for f in fields(ProjectionConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key in _SAMPLING_FIELDS:
            if not isinstance(value, dict):
                raise ConfigError(f"{key} must be a mapping")
            try:
                values[key] = Sampling(**value)
            except TypeError as exc:
                raise ConfigError(f"bad {key}: {exc}") from exc
        elif key in ("radius_range", "default_viewpoint"):
            values[key] = tuple(float(v) for v in value)
        else:
            values[key] = value

    cfg = replace(DEFAULT_CONFIG, **values)
    lo, hi = cfg.radius_range
    if not 0 < lo <= hi:
        raise ConfigError(f"bad radius range: {cfg.radius_range}")
    if len(cfg.default_viewpoint) != 3:
        raise ConfigError("default_viewpoint needs three coordinates")
    return cfg


def load_config(path: Path | str) -> ProjectionConfig:
    """Load configuration overrides from a YAML file."""

    cfg_path = Path(path)
    if not cfg_path.exists():
        raise FileNotFoundError(f"configuration not found: {cfg_path}")
    import yaml

    try:
        with cfg_path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{cfg_path} must contain a mapping")
    logger.debug("loaded %d configuration overrides from %s", len(data), cfg_path)
    return config_from_dict(data)


__all__ = [
    "ConfigError",
    "DEFAULT_CONFIG",
    "LINEAR_SHAPES",
    "ProjectionConfig",
    "ProjectionContext",
    "Sampling",
    "Toggles",
    "VERTEX_MAPPINGS",
    "config_from_dict",
    "load_config",
]
