"""
transport.py – Low-level SPI + GPIO transport
==============================================
Responsible for:
  • opening and closing the SPI bus (spidev)
  • configuring the chip-select GPIO (CS_PIN)
  • a single 16-bit xfer2 transfer, MSB first
  • resetting the SPI bus

The AS5050 samples MOSI on the falling clock edge with the clock idle
LOW (SPI mode 1). Chip select is driven by hand so that every 16-bit
word is framed by its own CS pulse, which the sensor needs to latch a
command.
"""

import time
import spidev
import RPi.GPIO as GPIO

from ..constants import (
    CS_PIN, CS_SETUP_TIME,
    SPI_BUS, SPI_DEVICE, SPI_SPEED_HZ, SPI_MODE,
)


class SPITransport:
    """
    SPI transport with manual Chip Select.

    Parameters
    ----------
    cs_pin : int
        BCM pin number used for Chip Select (default CS_PIN).
    speed_hz : int
        SPI clock [Hz].
    mode : int
        SPI mode (0–3). The AS5050 needs mode 1.
    bus, device : int
        spidev bus and device numbers.

    Example
    -------
    transport = SPITransport()
    transport.select()
    resp = transport.transfer_word(0xFFFF)
    transport.deselect()
    transport.close()
    """

    def __init__(
        self,
        cs_pin:   int = CS_PIN,
        speed_hz: int = SPI_SPEED_HZ,
        mode:     int = SPI_MODE,
        bus:      int = SPI_BUS,
        device:   int = SPI_DEVICE,
    ):
        self.cs_pin   = cs_pin
        self.speed_hz = speed_hz
        self.mode     = mode
        self.bus      = bus
        self.device   = device
        self._setup_gpio()
        self._spi = self._open_spi()

    # ------------------------------------------------------------------
    # Setup / teardown
    # ------------------------------------------------------------------

    def _setup_gpio(self) -> None:
        """Configures the CS pin (BCM numbering, warnings off)."""
        GPIO.setwarnings(False)
        GPIO.setmode(GPIO.BCM)
        GPIO.setup(self.cs_pin,  GPIO.OUT)
        GPIO.output(self.cs_pin, GPIO.HIGH)   # CS inactive (HIGH)

    def _open_spi(self) -> spidev.SpiDev:
        """Opens and configures the SPI device."""
        dev = spidev.SpiDev()
        dev.open(self.bus, self.device)
        dev.max_speed_hz = self.speed_hz
        dev.mode         = self.mode
        dev.no_cs        = True   # CS driven through GPIO
        return dev

    def close(self) -> None:
        """Closes SPI and releases the GPIO pin."""
        self._spi.close()
        GPIO.cleanup(self.cs_pin)

    # ------------------------------------------------------------------
    # Framing and transfer
    # ------------------------------------------------------------------

    def select(self) -> None:
        """Asserts Chip Select (LOW) and waits the setup time."""
        GPIO.output(self.cs_pin, GPIO.LOW)
        time.sleep(CS_SETUP_TIME)

    def deselect(self) -> None:
        """Releases Chip Select (HIGH)."""
        GPIO.output(self.cs_pin, GPIO.HIGH)

    def transfer_word(self, word: int) -> int:
        """
        Sends one 16-bit word and returns the word clocked in meanwhile.

        Parameters
        ----------
        word : int
            Frame to send (MOSI), MSB first.

        Returns
        -------
        int
            Frame received from the sensor (MISO).
        """
        msb, lsb = self._spi.xfer2([(word >> 8) & 0xFF, word & 0xFF])
        return (msb << 8) | lsb

    # ------------------------------------------------------------------
    # Bus reset
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """
        Resets the SPI bus.

        Closes and reopens spidev with the same settings. CS stays HIGH
        so the sensor sees no partial frame.
        """
        GPIO.output(self.cs_pin, GPIO.HIGH)
        self._spi.close()
        self._spi = self._open_spi()
