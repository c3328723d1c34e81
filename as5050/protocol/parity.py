"""
parity.py – Even parity of AS5050 frames
=========================================
Every 16-bit frame exchanged with the AS5050 carries a parity bit in
bit 0. The parity bit is chosen so that the whole word holds an even
number of ones, i.e. it equals the parity of bits 15..1.

Check:
  Word     : 0xFFFE  (15 ones in bits 15..1)
  Parity   : 1       -> frame 0xFFFF
"""

from ..constants import RES_PARITY, WORD_MASK


def even_parity(word: int) -> int:
    """
    Computes the parity bit for bits 15..1 of a frame.

    Parameters
    ----------
    word : int
        16-bit frame. Bit 0 is ignored.

    Returns
    -------
    int
        1 if bits 15..1 hold an odd number of ones, 0 otherwise.

    Example
    -------
    >>> even_parity(0xFFFE)
    1
    """
    return bin(word & WORD_MASK & ~RES_PARITY).count("1") & 1


def with_parity(word: int) -> int:
    """Returns the frame with bit 0 replaced by its even parity bit."""
    word &= WORD_MASK & ~RES_PARITY
    return word | even_parity(word)


def verify_parity(word: int) -> bool:
    """
    Checks the parity bit of a received frame.

    Parameters
    ----------
    word : int
        16-bit frame as received from the sensor.

    Returns
    -------
    bool
        True if bit 0 matches the even parity of bits 15..1.
    """
    return even_parity(word) == (word & RES_PARITY)
