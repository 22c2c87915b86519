from dataclasses import dataclass


@dataclass(frozen=True)
class BarrelsError:
    message: str


@dataclass(frozen=True)
class IngestError(BarrelsError):
    source_type: str
    source_detail: str
    row_number: int | None = None


@dataclass(frozen=True)
class ConfigError(BarrelsError):
    unrecognized_keys: tuple[str, ...] = ()
