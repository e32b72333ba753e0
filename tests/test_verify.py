import pytest
from PIL import Image

pytest.importorskip("cv2")
pytest.importorskip("pyzbar.pyzbar")

from heartqr.compositor import render_heart_qr  # noqa: E402
from heartqr.verify import is_scannable, scan_opencv, scan_pyzbar, verify  # noqa: E402

URL = "https://example.com"


@pytest.fixture(scope="module")
def heart_image():
    image, _ = render_heart_qr(URL, 512)
    return image


def test_rendered_heart_scans(heart_image):
    results = verify(heart_image, expected_data=URL)
    assert [r.decoder for r in results] == ["pyzbar/zbar", "opencv"]
    assert is_scannable(results)
    assert all(r.decoded_data == URL for r in results if r.success)


def test_expected_mismatch_fails(heart_image):
    results = verify(heart_image, expected_data="https://example.org")
    assert not is_scannable(results)
    assert any("mismatch" in (r.error or "") for r in results)


def test_blank_image_does_not_scan():
    blank = Image.new("RGB", (200, 200), (255, 255, 255))
    for result in (scan_pyzbar(blank), scan_opencv(blank)):
        assert not result.success
        assert result.error
