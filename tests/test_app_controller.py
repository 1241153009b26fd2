"""
Tests for the pipeline controller and the command-line entry point.
"""

import numpy as np
import pytest
from PIL import Image

from grayscope.controllers.app_controller import AppController
from grayscope.main import main, parse_args
from grayscope.models.config_model import AppConfig
from grayscope.models.image_model import ColorType
from grayscope.ui import report


@pytest.fixture
def color_png(write_image):
    data = np.zeros((2, 2, 3), dtype=np.uint8)
    data[0, 0] = (255, 0, 0)
    data[0, 1] = (0, 255, 0)
    data[1, 0] = (0, 0, 255)
    data[1, 1] = (255, 255, 255)
    return write_image("flowers.png", data)


@pytest.fixture
def gray_png(write_image):
    return write_image("gray_test_image.png", np.full((3, 3, 3), 200, dtype=np.uint8))


@pytest.fixture
def controller(tmp_path):
    lines = []
    ctrl = AppController(config=AppConfig(output_dir=tmp_path / "out"), emit=lines.append)
    ctrl.lines = lines
    return ctrl


class TestAppController:
    """End-to-end processing of image files."""

    def test_color_image(self, controller, color_png, tmp_path):
        results = controller.run([color_png])
        assert controller.failed == 0
        result = results[0]
        assert result.analysis.color_type is ColorType.RGB
        assert not result.analysis.is_monochrome
        assert result.stats.min_intensity == 18
        assert result.stats.max_intensity == 255
        assert result.stats.mean_intensity == pytest.approx((54 + 182 + 18 + 255) / 4)
        assert result.output_path == tmp_path / "out" / "flowers_gray.png"
        with Image.open(result.output_path) as image:
            assert np.asarray(image)[:, :, 0].tolist() == [[54, 182], [18, 255]]
        assert report.branch_message(False) in controller.lines

    def test_gray_image_announces_extract(self, controller, gray_png):
        result = controller.run([gray_png])[0]
        assert result.analysis.is_monochrome
        assert result.stats.mean_intensity == 200.0
        assert report.branch_message(True) in controller.lines

    def test_failures_do_not_stop_the_batch(self, controller, color_png, tmp_path):
        bad = tmp_path / "broken.png"
        bad.write_bytes(b"nope")
        results = controller.run([tmp_path / "missing.png", bad, color_png])
        assert len(results) == 1
        assert controller.failed == 2
        assert report.summary_message(1, 2) in controller.lines

    def test_oversized_image_fails_only_that_file(self, controller, color_png, write_image, monkeypatch):
        big = write_image("big.png", np.zeros((40, 40, 3), dtype=np.uint8))
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        results = controller.run([big, color_png])
        assert [r.path for r in results] == [color_png]
        assert controller.failed == 1
        assert report.summary_message(1, 1) in controller.lines

    def test_codec_closed_after_run(self, controller, color_png):
        controller.run([color_png])
        assert not controller.image_service.initialized

    def test_no_save(self, tmp_path, color_png):
        ctrl = AppController(config=AppConfig(output_dir=tmp_path / "out", save=False), emit=lambda line: None)
        result = ctrl.run([color_png])[0]
        assert result.output_path is None
        assert not (tmp_path / "out").exists()

    def test_save_single_channel(self, tmp_path, color_png):
        config = AppConfig(output_dir=tmp_path / "out", save_mode="L")
        result = AppController(config=config, emit=lambda line: None).run([color_png])[0]
        with Image.open(result.output_path) as image:
            assert image.mode == "L"

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            AppConfig(save_mode="RGBA")
        with pytest.raises(ValueError):
            AppConfig(tolerance=-2)


class TestMain:
    """Command-line driver."""

    def test_success_exit_code(self, color_png, tmp_path, capsys):
        code = main([str(color_png), "--output-dir", str(tmp_path / "o")])
        assert code == 0
        assert (tmp_path / "o" / "flowers_gray.png").exists()
        out = capsys.readouterr().out
        assert "Контраст: 237" in out

    def test_failure_exit_code(self, tmp_path, capsys):
        assert main([str(tmp_path / "missing.jpg"), "--no-save"]) == 1

    def test_no_save_flag(self, color_png, tmp_path):
        assert main([str(color_png), "--no-save", "--output-dir", str(tmp_path / "o")]) == 0
        assert not (tmp_path / "o").exists()

    def test_parse_args_defaults(self):
        args = parse_args(["a.png"])
        assert args.images == ["a.png"]
        assert args.mode == "RGB"
        assert args.tolerance == 1
        assert args.output_dir == "grayscale_images"

    def test_negative_tolerance_is_usage_error(self):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["a.png", "--tolerance", "-1"])
        assert exc_info.value.code == 2

    def test_images_required(self):
        with pytest.raises(SystemExit):
            parse_args([])
