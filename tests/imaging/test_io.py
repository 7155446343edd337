"""Tests for imaging.io module."""

from unittest.mock import patch

from PIL import Image

from imaging.io import save_png


class TestSavePng:
    """Tests for save_png function."""

    def test_saves_png(self, tmp_path):
        out = tmp_path / 'heatmap.png'
        save_png(Image.new('RGBA', (3, 2), (1, 2, 3, 255)), out)
        with Image.open(out) as img:
            assert img.format == 'PNG'
            assert img.size == (3, 2)
            assert img.convert('RGBA').getpixel((0, 0)) == (1, 2, 3, 255)

    def test_creates_parent_directory(self, tmp_path):
        out = tmp_path / 'a' / 'b' / 'out.png'
        save_png(Image.new('RGBA', (1, 1)), str(out))
        assert out.is_file()

    def test_png_regardless_of_extension(self, tmp_path):
        out = tmp_path / 'heatmap.dat'
        save_png(Image.new('RGBA', (1, 1)), out)
        assert out.read_bytes().startswith(b'\x89PNG')

    def test_fsync_called(self, tmp_path):
        with patch('imaging.io.os.fsync') as fsync:
            save_png(Image.new('RGBA', (1, 1)), tmp_path / 'x.png')
        fsync.assert_called_once()
