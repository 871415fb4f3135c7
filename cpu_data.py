# --------------------------
# CPU catalog data
# --------------------------

from typing import NamedTuple, Tuple


class CPU(NamedTuple):
    name: str
    year: int
    open_speed: int  # page-open speed score, higher is faster
    price: int       # single implicit currency unit


CPUS: Tuple[CPU, ...] = (
    CPU(name="Ryzen 7 7800X3D", year=2023, open_speed=980, price=2699),
    CPU(name="Core i5-13600K",  year=2022, open_speed=920, price=1999),
    CPU(name="Ryzen 5 5600",    year=2020, open_speed=620, price=799),
    CPU(name="Core i3-12100F",  year=2022, open_speed=580, price=699),
)


def get_all_cpus() -> Tuple[CPU, ...]:
    """Return every CPU record in authored order."""
    return CPUS
