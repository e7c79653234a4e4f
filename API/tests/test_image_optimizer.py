from PIL import Image

from chamber.services.image_optimizer import ImageOptimizer

from .conftest import make_image


def test_calculate_dimensions():
    optimizer = ImageOptimizer(max_width=1920, max_height=1080)
    assert optimizer.calculate_dimensions(800, 600) == (800, 600)
    assert optimizer.calculate_dimensions(3840, 2160) == (1920, 1080)
    assert optimizer.calculate_dimensions(1000, 4000) == (270, 1080)


def test_optimize_resizes_jpeg(tmp_path):
    path = tmp_path / "photo.jpg"
    path.write_bytes(make_image("JPEG", size=(400, 200)))

    result = ImageOptimizer(max_width=100, max_height=100).optimize(path)
    assert result.success
    assert (result.width, result.height) == (100, 50)
    with Image.open(path) as img:
        assert img.size == (100, 50)
        assert img.format == "JPEG"
    assert not (tmp_path / "photo.jpg.tmp").exists()


def test_optimize_keeps_png_format(tmp_path):
    path = tmp_path / "logo.png"
    path.write_bytes(make_image("PNG", size=(50, 50)))
    result = ImageOptimizer().optimize(path)
    assert result.success
    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.size == (50, 50)


def test_unsupported_format_left_untouched(tmp_path):
    path = tmp_path / "anim.gif"
    data = make_image("GIF", size=(30, 30))
    path.write_bytes(data)
    result = ImageOptimizer().optimize(path)
    assert not result.success
    assert path.read_bytes() == data


def test_corrupt_file_left_untouched(tmp_path):
    path = tmp_path / "broken.jpg"
    path.write_bytes(b"not really an image")
    result = ImageOptimizer().optimize(path)
    assert not result.success
    assert result.error
    assert path.read_bytes() == b"not really an image"
