from typing import Dict

from ..errors import Rejection


def init_metrics() -> Dict[str, int | float]:
    metrics: Dict[str, int | float] = {
        'attempts': 0,
        'walk_towers': 0,
        'towers_placed': 0,
        'decor_placed': 0,
        'runtime_ms': 0.0,
    }
    for reason in Rejection:
        metrics[f'rejected_{reason.value}'] = 0
    return metrics


def rejection_tally(metrics: Dict[str, int | float]) -> Dict[str, int]:
    return {
        k[len('rejected_'):]: int(v)
        for k, v in metrics.items()
        if k.startswith('rejected_') and v
    }
