def os_disk_name(vm_name: str) -> str:
    return f"{vm_name}-osdisk"


def data_disk_name(vm_name: str, index: int) -> str:
    """Name of the copy of the index-th (1-based) data disk.

    The "0" prefix is literal and kept for every index: 10 -> "datadisk010".
    """
    if index < 1:
        raise ValueError(f"data disk index must be >= 1, got {index}")
    return f"{vm_name}-datadisk0{index}"
