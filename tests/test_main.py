import cv2
import numpy as np
import pytest

import main
from rippleRenderer import RippleRenderer


def writePicture(path, width=40, height=30):
    y, x = np.mgrid[0:height, 0:width]
    bgr = np.zeros((height, width, 3), dtype=np.uint8)
    bgr[..., 0] = x * 6
    bgr[..., 1] = y * 8
    bgr[..., 2] = 90
    assert cv2.imwrite(str(path), bgr)
    return bgr


@pytest.mark.parametrize("point, control, image, expected", [
    ((10, 20), (100, 100), (100, 100), (10, 20)),
    ((300, 300), (600, 600), (300, 150), (150, 75)),
    ((599, 0), (600, 600), (1200, 300), (1198, 0)),
    ((7, 7), (10, 10), (3, 3), (2, 2)),
])
def test_translate_point(point, control, image, expected):
    assert main.translatePoint(point[0], point[1], control, image) == expected


def test_load_image_converts_to_rgb(tmp_path):
    path = tmp_path / "picture.png"
    bgr = writePicture(path)

    rgb = main.loadImage(str(path))
    assert rgb.dtype == np.uint8
    assert rgb.shape == (30, 40, 3)
    np.testing.assert_array_equal(rgb[..., 0], bgr[..., 2])
    np.testing.assert_array_equal(rgb[..., 2], bgr[..., 0])


def test_load_image_accepts_grayscale(tmp_path):
    path = tmp_path / "gray.png"
    assert cv2.imwrite(str(path), np.full((5, 6), 77, dtype=np.uint8))

    rgb = main.loadImage(str(path))
    assert rgb.shape == (5, 6, 3)
    assert np.all(rgb == 77)


def test_load_image_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        main.loadImage(str(tmp_path / "nope.png"))


def test_render_headless_disturbs_the_middle():
    source = np.full((40, 40, 3), 100, dtype=np.uint8)
    renderer = RippleRenderer(source)
    frame = main.renderHeadless(renderer, 3, 6)

    assert np.any(frame[15:25, 15:25] != 100)
    np.testing.assert_array_equal(frame[0], source[0])
    np.testing.assert_array_equal(frame[-1], source[-1])


def test_main_writes_headless_frame(tmp_path):
    picture = tmp_path / "picture.png"
    writePicture(picture)
    output = tmp_path / "out.png"

    status = main.main([str(picture), "--frames", "4", "--output", str(output),
                        "--config", str(tmp_path / "ripple.json")])

    assert status == 0
    frame = cv2.imread(str(output))
    assert frame.shape == (30, 40, 3)


def test_main_saves_effective_config(tmp_path):
    picture = tmp_path / "picture.png"
    writePicture(picture)
    configPath = tmp_path / "ripple.json"

    status = main.main([str(picture), "--frames", "1", "--output", str(tmp_path / "out.png"),
                        "--config", str(configPath), "--click-radius", "4", "--save-config"])

    assert status == 0
    assert '"clickSplashRadius": 4' in configPath.read_text()


def test_main_without_picture(tmp_path):
    assert main.main(["--config", str(tmp_path / "ripple.json")]) == 2


@pytest.fixture
def window(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    config = main.ConfigManager("does-not-exist.json")
    config.override(windowSize=[200, 100])
    renderer = RippleRenderer(np.full((50, 100, 3), 90, dtype=np.uint8))
    window = main.RippleWindow(renderer, config)
    yield window
    main.pygame.quit()


def event(kind, **attributes):
    return main.pygame.event.Event(kind, **attributes)


def test_window_click_and_drag_splash(window):
    pygame = main.pygame
    field = window.renderer.field

    assert window.handleEvent(event(pygame.MOUSEBUTTONDOWN, pos=(100, 50), button=1))
    assert window.dragging
    # window is twice the texture size, so the click lands on (50, 25)
    assert field.grid()[25, 50] == 255 - 768

    window.handleEvent(event(pygame.MOUSEMOTION, pos=(40, 40), rel=(0, 0), buttons=(1, 0, 0)))
    assert field.grid()[20, 20] == 255 - 768

    window.handleEvent(event(pygame.MOUSEBUTTONUP, pos=(40, 40), button=1))
    assert not window.dragging
    window.handleEvent(event(pygame.MOUSEMOTION, pos=(160, 80), rel=(0, 0), buttons=(0, 0, 0)))
    assert field.grid()[40, 80] == 0


def test_window_keys(window):
    pygame = main.pygame
    window.renderer.splash(50, 25, 5)

    assert window.handleEvent(event(pygame.KEYDOWN, key=pygame.K_SPACE))
    assert not window.animationEnabled
    assert window.renderer.field.energy() == 0

    window.handleEvent(event(pygame.KEYDOWN, key=pygame.K_SPACE))
    assert window.animationEnabled

    window.renderer.splash(50, 25, 5)
    window.handleEvent(event(pygame.KEYDOWN, key=pygame.K_c))
    assert window.renderer.field.energy() == 0

    assert not window.handleEvent(event(pygame.KEYDOWN, key=pygame.K_q))
    assert not window.handleEvent(event(pygame.QUIT))


def test_window_runs_until_quit(window):
    window.renderer.splash(50, 25, 8)
    main.pygame.event.post(event(main.pygame.QUIT))
    window.run()
    assert window.renderer.field.energy() > 0
