"""
constants.py – AS5050 protocol constants
=========================================
Source: AS5050 datasheet (SPI register map, error status register).
"""

# ---------------------------------------------------------------------------
# Frame layout (16-bit words, MSB first)
# ---------------------------------------------------------------------------
WORD_MASK        = 0xFFFF
READ_BIT         = 0x8000   # bit 15 of a command frame: 1 = read, 0 = write
WRITE_BIT        = 0x0000
ADDRESS_MASK     = 0x3FFF   # 14-bit register address
WRITE_DATA_MASK  = 0x3FFF   # 14-bit data field of a write-data frame

RES_PARITY       = 0x0001   # bit 0 of every frame
RES_ERROR_FLAG   = 0x0002   # bit 1 of a response frame
PAYLOAD_MASK     = 0x0FFF   # 12-bit payload (response bits 13..2)
ANGLE_MASK       = 0x03FF   # 10-bit angle inside the payload
PAYLOAD_ALARM_LO = 0x0400   # payload bit 10 (frame bit 12)
PAYLOAD_ALARM_HI = 0x0800   # payload bit 11 (frame bit 13)

# ---------------------------------------------------------------------------
# Registers (14-bit addresses)
# ---------------------------------------------------------------------------
REG_NOP            = 0x0000
REG_ANGLE          = 0x3FFF   # R   angle + alarm bits
REG_GAIN_CONTROL   = 0x3FF8   # R/W AGC gain
REG_ERROR_STATUS   = 0x335A   # R   error status
REG_CLEAR_ERROR    = 0x3380   # R   clears errors, returns residual status
REG_SOFTWARE_RESET = 0x3C00   # W   software reset
REG_MASTER_RESET   = 0x33A5   # W   full reset
REG_SYSTEM_CONFIG  = 0x3F20   # R/W system configuration
REG_POWER_ON_RESET = 0x3F22   # W   power-on reset

REG_NAMES = {
    REG_ANGLE:          "REG_ANGLE",
    REG_GAIN_CONTROL:   "REG_GAIN_CONTROL",
    REG_ERROR_STATUS:   "REG_ERROR_STATUS",
    REG_CLEAR_ERROR:    "REG_CLEAR_ERROR",
    REG_SOFTWARE_RESET: "REG_SOFTWARE_RESET",
    REG_MASTER_RESET:   "REG_MASTER_RESET",
    REG_SYSTEM_CONFIG:  "REG_SYSTEM_CONFIG",
    REG_POWER_ON_RESET: "REG_POWER_ON_RESET",
}

# Data written to REG_SOFTWARE_RESET: reset the SPI interface and DSP
DATA_SWRESET_SPI = 0x0002

# ---------------------------------------------------------------------------
# Error status register bits
# ---------------------------------------------------------------------------
ERR_PARITY = 0x0001   # parity error on the last command
ERR_CLKMON = 0x0002   # wrong number of clock cycles
ERR_ADDMON = 0x0004   # invalid address in the last command
ERR_WOW    = 0x0008   # watchdog: internal deadlock
ERR_DSPOV  = 0x0010   # CORDIC overflow, input signals too large
ERR_DSPALO = 0x0020   # AGC alarm low: gain too low
ERR_DSPAHI = 0x0040   # AGC alarm high: gain too high
ERR_DACOV  = 0x0080   # Hall sensor saturated (magnet displaced)
ERR_RANERR = 0x0100   # accuracy degraded by temperature
ERR_MODE   = 0x0200   # chip not in measurement mode

ERROR_NAMES = {
    ERR_PARITY: "ERR_PARITY",
    ERR_CLKMON: "ERR_CLKMON",
    ERR_ADDMON: "ERR_ADDMON",
    ERR_WOW:    "ERR_WOW",
    ERR_DSPOV:  "ERR_DSPOV",
    ERR_DSPALO: "ERR_DSPALO",
    ERR_DSPAHI: "ERR_DSPAHI",
    ERR_DACOV:  "ERR_DACOV",
    ERR_RANERR: "ERR_RANERR",
    ERR_MODE:   "ERR_MODE",
}

# Fault classes
ERR_SESSION_MASK  = ERR_WOW | ERR_DSPOV
ERR_HARDWARE_MASK = ERR_DACOV | ERR_RANERR
ERR_ADVISORY_MASK = ERR_HARDWARE_MASK | ERR_MODE | ERR_CLKMON | ERR_ADDMON

# ---------------------------------------------------------------------------
# Angle tracking
# ---------------------------------------------------------------------------
ANGULAR_RESOLUTION = 1024            # 10-bit angle
WRAP_BOUND         = ANGULAR_RESOLUTION // 4
WRAP_CEILING       = ANGULAR_RESOLUTION - WRAP_BOUND
WARM_UP_SAMPLES    = 2               # discarded reads before the first real sample
NUM_ANGLE_SAMPLES  = 1               # default averaging window of angle()

# ---------------------------------------------------------------------------
# GPIO pins (BCM)
# ---------------------------------------------------------------------------
CS_PIN = 8   # Chip Select, active LOW

# ---------------------------------------------------------------------------
# Timing constants [seconds]
# ---------------------------------------------------------------------------
CS_SETUP_TIME = 0.000001   # 1 µs – CS setup before the first clock edge

# ---------------------------------------------------------------------------
# SPI parameters
# ---------------------------------------------------------------------------
SPI_BUS      = 0
SPI_DEVICE   = 0
SPI_SPEED_HZ = 1_000_000
SPI_MODE     = 0b01   # CPOL 0, CPHA 1
