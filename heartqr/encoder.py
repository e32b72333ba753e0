"""QR encoder adapter: text in, immutable module matrix out."""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from heartqr import ERROR_LEVEL
from heartqr.errors import EncoderUnavailable, InputError
from heartqr.logging import audit, get_logger, trace

log = get_logger("encoder")


@dataclass(frozen=True)
class ModuleMatrix:
    """Square dark/light grid as produced by a QR encoder (True = dark)."""

    modules: tuple[tuple[bool, ...], ...]
    version: int | None = None

    def __post_init__(self):
        n = len(self.modules)
        if n == 0 or any(len(row) != n for row in self.modules):
            raise ValueError("Module matrix must be a non-empty square grid")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence], version: int | None = None) -> "ModuleMatrix":
        return cls(tuple(tuple(bool(v) for v in row) for row in rows), version)

    @property
    def n(self) -> int:
        return len(self.modules)

    def is_dark(self, row: int, col: int) -> bool:
        return self.modules[row][col]

    def dark_count(self) -> int:
        return sum(sum(row) for row in self.modules)


Encoder = Callable[[str, str], ModuleMatrix]


def qrcode_error_level(ecc: str):
    """python-qrcode constant for an L/M/Q/H level name."""
    import qrcode.constants

    levels = {
        "L": qrcode.constants.ERROR_CORRECT_L,  # 7%
        "M": qrcode.constants.ERROR_CORRECT_M,  # 15%
        "Q": qrcode.constants.ERROR_CORRECT_Q,  # 25%
        "H": qrcode.constants.ERROR_CORRECT_H,  # 30%
    }
    try:
        return levels[ecc.upper()]
    except KeyError:
        raise InputError(f"Unknown error-correction level '{ecc}'") from None


@trace
def encode(text: str, ecc: str = ERROR_LEVEL) -> ModuleMatrix:
    """Encode *text* with python-qrcode at the smallest fitting version.

    Raises:
        EncoderUnavailable: the qrcode library cannot be imported.
        InputError: empty text or a payload over QR capacity.
    """
    try:
        import qrcode
        from qrcode.exceptions import DataOverflowError
    except ImportError as e:
        raise EncoderUnavailable("QR encoder library 'qrcode' is not installed") from e

    if not text:
        raise InputError("QR data cannot be empty.")

    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode_error_level(ecc),
        box_size=1,
        border=0,
    )
    qr.add_data(text)
    try:
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as e:
        raise InputError(f"Text too long for a QR code at level {ecc.upper()}: {e}") from e

    matrix = ModuleMatrix.from_rows(qr.modules, version=qr.version)
    audit("qr.encoded", logger=log, data=text[:80], version=qr.version,
          size=f"{matrix.n}x{matrix.n}", ecc=ecc.upper())
    return matrix


def resolve_encoder(encoder: Encoder | None) -> Encoder:
    """Return *encoder*, or the qrcode-backed default when None."""
    if encoder is None:
        return encode
    if not callable(encoder):
        raise EncoderUnavailable(f"QR encoder {encoder!r} is not callable")
    return encoder
