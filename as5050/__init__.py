"""
as5050 – Driver for the AS5050 magnetic rotary encoder (SPI)
=============================================================
Package layout:
    as5050/
    ├── __init__.py          – public API
    ├── constants.py         – register map, error bits, bus settings
    ├── sensor.py            – AS5050 facade
    ├── engine.py            – TransactionEngine (register read / write)
    ├── tracker.py           – AngleTracker (multi-turn position)
    ├── faults.py            – FaultManager (error status handling)
    ├── core/
    │   ├── __init__.py
    │   ├── bus.py           – Transport protocol, framed exchange
    │   └── transport.py     – SPITransport: spidev + GPIO chip select
    ├── protocol/
    │   ├── __init__.py
    │   ├── parity.py        – even parity of 16-bit frames
    │   ├── frame.py         – frame encoding / response decoding
    │   ├── read.py          – READ path
    │   └── write.py         – WRITE path
    └── utils/
        ├── __init__.py
        ├── log.py           – CommunicationLog (MOSI/MISO dump)
        └── stats.py         – FaultStats (counters per fault)

Quick start:
    from as5050 import AS5050

    sensor = AS5050()                      # SPITransport on CE0, CS on GPIO8
    print(sensor.angle_degrees())
    print(sensor.total_angle())            # multi-turn, native units
    sensor.close()
"""

from .sensor import AS5050                          # noqa: F401 – main interface
from .engine import TransactionEngine               # noqa: F401
from .tracker import AngleTracker, TrackerState     # noqa: F401
from .faults import FaultManager, FaultReport, describe_status   # noqa: F401
from .protocol.frame import TransactionResult       # noqa: F401
from .utils.log import CommunicationLog             # noqa: F401
from .constants import (                            # noqa: F401 – constants for import
    REG_ANGLE, REG_GAIN_CONTROL, REG_ERROR_STATUS, REG_CLEAR_ERROR,
    REG_SOFTWARE_RESET, REG_MASTER_RESET, REG_SYSTEM_CONFIG, REG_POWER_ON_RESET,
    ERR_PARITY, ERR_CLKMON, ERR_ADDMON, ERR_WOW, ERR_DSPOV,
    ERR_DSPALO, ERR_DSPAHI, ERR_DACOV, ERR_RANERR, ERR_MODE,
    ANGULAR_RESOLUTION,
)

__version__ = "1.0.0"
__all__ = ["AS5050"]
