"""Domain models for mirrored health samples."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class HealthSample:
    """A physiological sample mirrored from the device health store."""

    id: str
    sample_type: str
    payload: dict[str, object] = field(default_factory=dict)
