"""Scan verification: decode a rendered heart QR with real decoders."""

import time
from collections.abc import Callable
from dataclasses import dataclass

import cv2
import numpy as np
from PIL import Image
from pyzbar.pyzbar import ZBarSymbol
from pyzbar.pyzbar import decode as pyzbar_decode

from heartqr.logging import audit, get_logger, trace

log = get_logger("verify")


@dataclass
class ScanResult:
    """Result of a single decode attempt."""
    success: bool
    decoded_data: str | None = None
    decode_time_ms: float = 0.0
    decoder: str = ""
    error: str | None = None


def _decode_pyzbar(image: Image.Image) -> str | None:
    results = pyzbar_decode(image.convert("L"), symbols=[ZBarSymbol.QRCODE])
    if not results:
        return None
    return results[0].data.decode("utf-8", errors="replace")


def _decode_opencv(image: Image.Image) -> str | None:
    gray = cv2.cvtColor(np.array(image.convert("RGB")), cv2.COLOR_RGB2GRAY)
    data, _points, _ = cv2.QRCodeDetector().detectAndDecode(gray)
    return data or None


DECODERS: dict[str, Callable[[Image.Image], str | None]] = {
    "pyzbar/zbar": _decode_pyzbar,
    "opencv": _decode_opencv,
}


def _scan(name: str, image: Image.Image) -> ScanResult:
    start = time.perf_counter()
    try:
        data = DECODERS[name](image)
    except Exception as e:  # decoder backends raise a variety of native errors
        elapsed = (time.perf_counter() - start) * 1000
        audit("scan.error", logger=log, decoder=name, error=str(e), time_ms=round(elapsed, 1))
        return ScanResult(success=False, decode_time_ms=elapsed, decoder=name, error=str(e))

    elapsed = (time.perf_counter() - start) * 1000
    if data is None:
        audit("scan.verified", logger=log, decoder=name, success=False, time_ms=round(elapsed, 1))
        return ScanResult(success=False, decode_time_ms=elapsed, decoder=name,
                          error="No QR code detected")
    audit("scan.verified", logger=log, decoder=name, success=True,
          time_ms=round(elapsed, 1), data=data[:80])
    return ScanResult(success=True, decoded_data=data, decode_time_ms=elapsed, decoder=name)


def scan_pyzbar(image: Image.Image) -> ScanResult:
    """Decode with pyzbar (wraps ZBar)."""
    return _scan("pyzbar/zbar", image)


def scan_opencv(image: Image.Image) -> ScanResult:
    """Decode with OpenCV's built-in QR detector."""
    return _scan("opencv", image)


@trace
def verify(image: Image.Image, expected_data: str | None = None) -> list[ScanResult]:
    """Run every decoder on *image*.

    Args:
        image: Rendered heart QR.
        expected_data: If given, a decode with different content counts as a failure.

    Returns:
        One ScanResult per decoder.
    """
    results = []
    for name in DECODERS:
        result = _scan(name, image)
        if result.success and expected_data is not None and result.decoded_data != expected_data:
            result.success = False
            result.error = f"Data mismatch: got '{result.decoded_data}', expected '{expected_data}'"
        results.append(result)
    return results


def is_scannable(results: list[ScanResult]) -> bool:
    return any(r.success for r in results)
