import numpy as np
from typing import Dict, Tuple
import json
import yaml
from pathlib import Path
from datetime import datetime


def calculate_distance(point1: np.ndarray,
                       point2: np.ndarray) -> float:
    """3D Euclidean distance

    Parameters
    ----------
    point1, point2 : np.ndarray
        Coordinates [x, y, z]

    Returns
    -------
    float
        Distance between the two points
    """
    return float(np.linalg.norm(np.asarray(point1) - np.asarray(point2)))


def reflect_into_range(value: float, lo: float, hi: float) -> Tuple[float, bool]:
    """Fold a coordinate back into [lo, hi] as if it bounced off both walls

    Parameters
    ----------
    value : float
        Unbounded coordinate
    lo, hi : float
        Interval limits

    Returns
    -------
    tuple
        (folded coordinate, True if the motion ends up reversed)
    """
    width = hi - lo
    if width <= 0:
        return lo, False
    period = 2.0 * width
    u = (value - lo) % period
    if u <= width:
        return lo + u, False
    return hi - (u - width), True


def save_results(results: Dict,
                 filepath: str,
                 format: str = 'json') -> None:
    """Save a dictionary as JSON or YAML

    Parameters
    ----------
    results : dict
        Data to save
    filepath : str
        Destination path
    format : str
        File format ('json' or 'yaml')
    """
    def convert_numpy(obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, np.generic):
            return obj.item()
        elif isinstance(obj, dict):
            return {k: convert_numpy(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [convert_numpy(i) for i in obj]
        return obj

    results = convert_numpy(results)

    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    if format.lower() == 'json':
        with open(path, 'w') as f:
            json.dump(results, f, indent=2)
    elif format.lower() in ('yaml', 'yml'):
        with open(path, 'w') as f:
            yaml.safe_dump(results, f, sort_keys=False)
    else:
        raise ValueError(f"Unsupported format: {format}")


def load_results(filepath: str) -> Dict:
    """Load a dictionary from a JSON or YAML file"""
    path = Path(filepath)

    if path.suffix == '.json':
        with open(path) as f:
            return json.load(f)
    elif path.suffix in ['.yml', '.yaml']:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    else:
        raise ValueError(f"Unsupported file format: {path.suffix}")


def generate_timestamp() -> str:
    """Timestamp in YYYYMMDD_HHMMSS form"""
    return datetime.now().strftime('%Y%m%d_%H%M%S')
