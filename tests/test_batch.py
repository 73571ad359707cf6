from pathlib import Path

import pytest
from PIL import Image

from sunday.imaging.batch import BatchError, output_extension, output_path, run_batches
from sunday.imaging.settings import BatchConfig, ImageEditorSettings


@pytest.fixture
def input_folder(tmp_path):
    folder = tmp_path / "in"
    folder.mkdir()
    Image.new("RGB", (120, 80), (10, 10, 10)).save(folder / "roof.jpg")
    Image.new("RGB", (120, 80), (10, 10, 10)).save(folder / "cap.png")
    return folder


def _settings(input_folder, output_folder, **overrides):
    settings = ImageEditorSettings(
        input_folder=str(input_folder),
        output_folder=str(output_folder),
        x_start=0,
        y_start=0,
        width=50,
        height=20,
        **overrides,
    )
    settings.add_batch("(888) 555-1234", "DFW")
    settings.add_batch("(512) 555-9876", "aus")
    return settings


def test_output_naming():
    batch = BatchConfig("555", "Dfw")
    path = output_path("/out", batch, Path("photo.JPG"), "JPG")
    assert str(path) == "/out/DFW/photo-dfw.JPG"
    assert output_extension(Path("a.jpeg"), "original") == "jpeg"
    assert output_extension(Path("a.jpeg"), "webp") == "webp"


def test_every_batch_gets_every_image(tmp_path, input_folder):
    out = tmp_path / "out"
    progress = []
    report = run_batches(_settings(input_folder, out), lambda *args: progress.append(args))
    assert report.total == 4
    assert report.processed == 4
    assert report.failures == []
    assert sorted(p.name for p in (out / "DFW").iterdir()) == ["cap-dfw.png", "roof-dfw.jpg"]
    assert sorted(p.name for p in (out / "AUS").iterdir()) == ["cap-aus.png", "roof-aus.jpg"]
    with Image.open(out / "DFW" / "roof-dfw.jpg") as written:
        assert written.format == "JPEG"
    assert progress[-1] == (4, 4, "Done")
    assert progress[0][:2] == (0, 4)


def test_forced_format_encodes_properly(tmp_path, input_folder):
    out = tmp_path / "out"
    run_batches(_settings(input_folder, out, output_format="webp"))
    with Image.open(out / "AUS" / "roof-aus.webp") as written:
        assert written.format == "WEBP"


def test_unreadable_image_is_reported_and_skipped(tmp_path, input_folder):
    (input_folder / "broken.png").write_bytes(b"not an image")
    out = tmp_path / "out"
    report = run_batches(_settings(input_folder, out))
    assert report.processed == 4
    assert len(report.failures) == 2
    assert not (out / "DFW" / "broken-dfw.png").exists()


def test_preconditions(tmp_path, input_folder):
    settings = ImageEditorSettings(input_folder=str(input_folder), output_folder=str(tmp_path))
    with pytest.raises(BatchError, match="No batches"):
        run_batches(settings)
    settings.add_batch("555", "DFW")
    settings.input_folder = str(tmp_path / "empty")
    with pytest.raises(BatchError, match="No images"):
        run_batches(settings)
    settings.input_folder = str(input_folder)
    settings.output_folder = ""
    with pytest.raises(BatchError, match="output folder"):
        run_batches(settings)


def test_corrupt_watermark_does_not_fail_the_run(tmp_path, input_folder):
    mark_path = tmp_path / "mark.png"
    mark_path.write_bytes(b"garbage")
    out = tmp_path / "out"
    report = run_batches(_settings(input_folder, out, watermark_path=str(mark_path)))
    assert report.processed == 4
    assert report.failures == []


def test_bmp_and_gif_keep_their_format(tmp_path):
    folder = tmp_path / "legacy"
    folder.mkdir()
    Image.new("RGB", (120, 80), (30, 60, 90)).save(folder / "logo.bmp")
    Image.new("RGB", (120, 80), (30, 60, 90)).save(folder / "badge.gif")
    out = tmp_path / "out"
    report = run_batches(_settings(folder, out))
    assert report.failures == []
    with Image.open(out / "DFW" / "logo-dfw.bmp") as written:
        assert written.format == "BMP"
        assert written.mode == "RGB"
    with Image.open(out / "AUS" / "badge-aus.gif") as written:
        assert written.format == "GIF"
