from dataclasses import dataclass
from typing import Optional


@dataclass
class GeocodeConfig:
    """Configuration for the geocode shell."""

    api_key: Optional[str] = None
    timeout: int = 30
    cluster_count: int = 3
    cluster_rounds: int = 32
    map_output: Optional[str] = None
    write_map: bool = False
    log_level: str = "WARNING"
    log_dir: Optional[str] = None
