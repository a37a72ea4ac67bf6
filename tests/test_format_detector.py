import unittest

from folioexif.format_detector import ContainerKind, FormatDetector

from image_builders import app1_exif, ascii_entry, build_jpeg, build_tiff, build_webp, riff_chunk


class TestSniff(unittest.TestCase):
    def test_jpeg(self) -> None:
        self.assertIs(FormatDetector.sniff(build_jpeg()), ContainerKind.JPEG)

    def test_webp(self) -> None:
        data = build_webp(riff_chunk(b'VP8 ', b'\x00' * 10))
        self.assertIs(FormatDetector.sniff(data), ContainerKind.WEBP)

    def test_riff_without_webp_form_type(self) -> None:
        data = b'RIFF\x04\x00\x00\x00WAVE'
        self.assertIs(FormatDetector.sniff(data), ContainerKind.UNKNOWN)

    def test_tiff_byte_order_marks(self) -> None:
        for endian in ('<', '>'):
            tiff = build_tiff([ascii_entry(0x010F, 'Canon')], endian=endian)
            self.assertIs(FormatDetector.sniff(tiff), ContainerKind.TIFF)

    def test_tiff_filename_hint(self) -> None:
        data = b'\x00\x01\x02\x03\x04'
        self.assertIs(FormatDetector.sniff(data), ContainerKind.UNKNOWN)
        self.assertIs(FormatDetector.sniff(data, 'scan.TIF'), ContainerKind.TIFF)
        self.assertIs(FormatDetector.sniff(data, 'tiff'), ContainerKind.TIFF)

    def test_magic_beats_filename(self) -> None:
        data = build_jpeg(app1_exif(build_tiff([ascii_entry(0x010F, 'Canon')])))
        self.assertIs(FormatDetector.sniff(data, 'mislabelled.webp'), ContainerKind.JPEG)
        self.assertIs(FormatDetector.sniff(data, 'mislabelled.tiff'), ContainerKind.JPEG)

    def test_short_buffers_are_unknown(self) -> None:
        for data in (b'', b'\xff', b'\xff\xd8', b'\xff\xd8\xff'):
            self.assertIs(FormatDetector.sniff(data), ContainerKind.UNKNOWN)
        self.assertIs(FormatDetector.sniff(None), ContainerKind.UNKNOWN)

    def test_garbage(self) -> None:
        self.assertIs(FormatDetector.sniff(b'GIF89a\x01\x00'), ContainerKind.UNKNOWN)


class TestKindFromFilename(unittest.TestCase):
    def test_extensions(self) -> None:
        self.assertIs(FormatDetector.kind_from_filename('a/b/IMG_0001.JPG'), ContainerKind.JPEG)
        self.assertIs(FormatDetector.kind_from_filename('photo.jpeg'), ContainerKind.JPEG)
        self.assertIs(FormatDetector.kind_from_filename('photo.webp'), ContainerKind.WEBP)
        self.assertIs(FormatDetector.kind_from_filename('webp'), ContainerKind.WEBP)

    def test_unknown(self) -> None:
        self.assertIsNone(FormatDetector.kind_from_filename(None))
        self.assertIsNone(FormatDetector.kind_from_filename(''))
        self.assertIsNone(FormatDetector.kind_from_filename('photo.png'))
        self.assertIsNone(FormatDetector.kind_from_filename('README'))


if __name__ == "__main__":
    unittest.main()
