from PIL import Image

from sunday.imaging.compositor import Compositor, composite_at, pick_color, rotate, scale_alpha
from sunday.imaging.settings import ImageEditorSettings


def _blank(size=(200, 100), color=(0, 0, 0)):
    return Image.new("RGB", size, color)


def test_rotate_expands_canvas():
    image = Image.new("RGBA", (40, 10))
    assert rotate(image, 90).size == (10, 40)
    assert rotate(image, 360) is image


def test_composite_at_clips_outside_edges():
    base = Image.new("RGBA", (10, 10), (0, 0, 0, 255))
    overlay = Image.new("RGBA", (5, 5), (255, 0, 0, 255))
    result = composite_at(base, overlay, 8, 8)
    assert result.getpixel((9, 9)) == (255, 0, 0, 255)
    assert result.getpixel((7, 7)) == (0, 0, 0, 255)


def test_scale_alpha():
    image = Image.new("RGBA", (2, 2), (10, 20, 30, 255))
    assert scale_alpha(image, 128).getpixel((0, 0))[3] == 128
    assert scale_alpha(image, 0).getpixel((0, 0))[3] == 0


def test_background_rectangle_is_drawn():
    settings = ImageEditorSettings(x_start=10, y_start=10, width=20, height=10, disable_font=True)
    result = Compositor(settings).compose(_blank(), "")
    assert result.getpixel((15, 15))[:3] == (0x72, 0x15, 0x22)
    assert result.getpixel((5, 5))[:3] == (0, 0, 0)


def test_disable_flags_leave_image_untouched():
    settings = ImageEditorSettings(
        disable_background=True, disable_font=True, disable_watermark=True
    )
    source = _blank(color=(1, 2, 3))
    result = Compositor(settings).compose(source, "555-1234")
    assert result.convert("RGB").tobytes() == source.tobytes()


def test_text_is_rendered_in_text_color():
    settings = ImageEditorSettings(
        disable_background=True, text_x=5, text_y=5, font_size=30, text_color="#ffffff"
    )
    result = Compositor(settings).compose(_blank(), "888")
    assert any(min(pixel[:3]) > 200 for pixel in result.getdata())


def test_letter_spacing_widens_text_tile():
    tight = Compositor(ImageEditorSettings(font_size=20)).render_text("1234")
    loose = Compositor(ImageEditorSettings(font_size=20, letter_spacing=10)).render_text("1234")
    assert loose.width >= tight.width + 25


def test_watermark_is_scaled_and_placed(tmp_path):
    mark_path = tmp_path / "mark.png"
    Image.new("RGBA", (50, 25), (0, 255, 0, 255)).save(mark_path)
    settings = ImageEditorSettings(
        disable_background=True,
        disable_font=True,
        watermark_path=str(mark_path),
        watermark_size=20,
        watermark_x=100,
        watermark_y=50,
        watermark_transparency=255,
    )
    compositor = Compositor(settings)
    assert compositor.watermark.size == (20, 10)
    result = compositor.compose(_blank(), "")
    red, green, _blue, _alpha = result.getpixel((105, 55))
    assert green > 240 and red < 15
    assert result.getpixel((95, 55))[:3] == (0, 0, 0)


def test_missing_watermark_is_skipped():
    settings = ImageEditorSettings(watermark_path="/does/not/exist.png")
    assert Compositor(settings).watermark is None


def test_pick_color_maps_through_letterbox():
    image = Image.new("RGB", (200, 100), (0, 0, 0))
    image.paste((255, 0, 0), (100, 0, 200, 100))
    # 200x100 shown in a 100x100 widget: scale 2, 25px bars top and bottom
    assert pick_color(image, (75, 50), (100, 100)) == "#ff0000"
    assert pick_color(image, (25, 50), (100, 100)) == "#000000"
    assert pick_color(image, (500, 500), (100, 100)) == "#ff0000"


def test_corrupt_watermark_is_skipped(tmp_path, caplog):
    mark_path = tmp_path / "mark.png"
    mark_path.write_bytes(b"garbage")
    settings = ImageEditorSettings(
        disable_background=True, disable_font=True, watermark_path=str(mark_path)
    )
    compositor = Compositor(settings)
    source = _blank(color=(4, 5, 6))
    result = compositor.compose(source, "")
    assert compositor.watermark is None
    assert result.convert("RGB").tobytes() == source.tobytes()
    assert "unreadable watermark" in caplog.text


def test_rotated_background_is_expanded_and_placed():
    settings = ImageEditorSettings(
        x_start=10, y_start=10, width=40, height=10, bg_rotation=90, disable_font=True
    )
    result = Compositor(settings).compose(_blank(), "")
    # 40x10 turned upright covers x 10..19, y 10..49
    assert result.getpixel((15, 45))[:3] == (0x72, 0x15, 0x22)
    assert result.getpixel((40, 15))[:3] == (0, 0, 0)


def _ink_box(image):
    return image.convert("L").point(lambda v: 255 if v > 128 else 0).getbbox()


def test_text_rotates_about_its_centre():
    text = "8888888"
    flat = ImageEditorSettings(
        disable_background=True, text_x=60, text_y=60, font_size=20, text_color="#ffffff"
    )
    compositor = Compositor(flat)
    tile = compositor.render_text(text)
    centre_x = flat.text_x + tile.width / 2
    centre_y = flat.text_y + tile.height / 2

    left, top, right, bottom = _ink_box(compositor.compose(_blank((200, 200)), text))
    assert right - left > bottom - top

    turned = ImageEditorSettings(
        disable_background=True,
        text_x=60,
        text_y=60,
        font_size=20,
        text_color="#ffffff",
        text_rotation=90,
    )
    left, top, right, bottom = _ink_box(Compositor(turned).compose(_blank((200, 200)), text))
    assert bottom - top > right - left
    assert abs((left + right) / 2 - centre_x) <= 10
    assert abs((top + bottom) / 2 - centre_y) <= 10


def test_rotated_watermark_is_placed(tmp_path):
    mark_path = tmp_path / "mark.png"
    Image.new("RGBA", (40, 20), (0, 255, 0, 255)).save(mark_path)
    settings = ImageEditorSettings(
        disable_background=True,
        disable_font=True,
        watermark_path=str(mark_path),
        watermark_size=40,
        watermark_x=100,
        watermark_y=50,
        watermark_rotation=90,
        watermark_transparency=255,
    )
    compositor = Compositor(settings)
    assert compositor.watermark.size == (20, 40)
    result = compositor.compose(_blank((200, 150)), "")
    assert result.getpixel((105, 85))[:3] == (0, 255, 0)
    assert result.getpixel((130, 55))[:3] == (0, 0, 0)
