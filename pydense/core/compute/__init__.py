"""
Shared compute infrastructure for PyDense.

Submodules:
    device: Hardware detection and device selection
    tolerances: Tolerance tiers for numerical comparison
"""

from pydense.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)

__all__ = [
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
]
