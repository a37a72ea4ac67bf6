import struct
import tempfile
import unittest
from pathlib import Path

from folioexif import extract_metadata, read_metadata
from folioexif.config import ExtractorConfig
from folioexif.core import read_prefix
from folioexif.exceptions import MetadataReadError
from folioexif.metadata import GPSLocation, Metadata, PlaceLocation

from image_builders import (
    SHORT,
    Entry,
    app1_exif,
    app13_iptc,
    ascii_entry,
    build_jpeg,
    build_tiff,
    build_webp,
    iptc_dataset,
    pittsburgh_gps,
    riff_chunk,
    segment,
)


def concert_jpeg() -> bytes:
    tiff = build_tiff(
        [ascii_entry(0x010F, 'Canon'), ascii_entry(0x0132, '2024:09:01 08:00:00')],
        exif=[ascii_entry(0x9003, '2024:08:29 20:15:00')],
        gps=pittsburgh_gps(),
    )
    iptc = app13_iptc([
        iptc_dataset(0x78, 'Jazz night at the Kelly Strayhorn'),
        iptc_dataset(0x19, 'jazz'),
        iptc_dataset(0x19, 'live'),
    ])
    return build_jpeg(app1_exif(tiff), iptc)


class TestExtractMetadata(unittest.TestCase):
    def test_full_jpeg(self) -> None:
        metadata = extract_metadata(concert_jpeg())
        self.assertEqual(metadata.date, '2024-08-29T20:15:00Z')
        self.assertEqual(metadata.caption, 'Jazz night at the Kelly Strayhorn')
        self.assertEqual(metadata.caption_source, 'iptc')
        self.assertEqual(metadata.keywords, ('jazz', 'live'))
        self.assertIsInstance(metadata.location, GPSLocation)
        self.assertAlmostEqual(metadata.location.latitude, 40.4461, places=4)
        self.assertAlmostEqual(metadata.location.longitude, -79.9486, places=4)

    def test_big_endian_jpeg(self) -> None:
        tiff = build_tiff([ascii_entry(0x0132, '2023:01:02 03:04:05')], endian='>')
        self.assertEqual(extract_metadata(build_jpeg(app1_exif(tiff))).date, '2023-01-02T03:04:05Z')

    def test_date_time_only(self) -> None:
        tiff = build_tiff([ascii_entry(0x0132, '2024:09:01 08:00:00')])
        self.assertEqual(extract_metadata(build_jpeg(app1_exif(tiff))).date, '2024-09-01T08:00:00Z')

    def test_idempotent(self) -> None:
        data = concert_jpeg()
        self.assertEqual(extract_metadata(data), extract_metadata(data))

    def test_short_buffers(self) -> None:
        for data in (None, b'', b'\xff', b'\xff\xd8', b'\xff\xd8\xff'):
            self.assertEqual(extract_metadata(data), Metadata.empty())

    def test_garbage(self) -> None:
        self.assertTrue(extract_metadata(b'\x00\x11' * 500).is_empty())
        self.assertTrue(extract_metadata(b'GIF89a' + b'\x00' * 100).is_empty())

    def test_jpeg_without_metadata(self) -> None:
        jfif = segment(0xFFE0, b'JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00')
        self.assertTrue(extract_metadata(build_jpeg(jfif)).is_empty())

    def test_truncated_prefix(self) -> None:
        data = concert_jpeg()
        for cut in (3, 10, 24, 40, 80, len(data) // 2, len(data) - 1):
            self.assertIsInstance(extract_metadata(data[:cut]), Metadata)

    def test_malformed_tiff_keeps_iptc(self) -> None:
        bad_tiff = b'XX' + struct.pack('<HI', 42, 8) + b'\x00' * 20
        data = build_jpeg(app1_exif(bad_tiff), app13_iptc([iptc_dataset(0x78, 'Still here')]))
        metadata = extract_metadata(data)
        self.assertEqual(metadata.caption, 'Still here')
        self.assertIsNone(metadata.date)

    def test_iptc_after_binary_photoshop_resource(self) -> None:
        # A 0x03ED resource whose body happens to contain 1C 02 00 00 28
        body = b'\x00\x00\x1c\x02\x00\x00\x28' + b'\x00' * 9
        resolution = b'8BIM' + struct.pack('>H', 0x03ED) + b'\x00\x00' + struct.pack('>I', len(body)) + body
        iptc = iptc_dataset(0x78, 'Real caption') + b'\x00'
        caption_block = b'8BIM' + struct.pack('>H', 0x0404) + b'\x00\x00' + struct.pack('>I', len(iptc)) + iptc
        app13 = segment(0xFFED, b'Photoshop 3.0\x00' + resolution + caption_block)
        self.assertEqual(extract_metadata(build_jpeg(app13)).caption, 'Real caption')

    def test_placeholder_date_is_kept(self) -> None:
        tiff = build_tiff([], exif=[ascii_entry(0x9003, '0000:00:00 00:00:00')])
        self.assertEqual(extract_metadata(build_jpeg(app1_exif(tiff))).date, '0000-00-00T00:00:00Z')

    def test_corrupt_entry_keeps_others(self) -> None:
        tiff = build_tiff([
            Entry(0x0123, SHORT, count=1000, value_field=struct.pack('<I', 8)),
            ascii_entry(0x0132, '2024:09:01 08:00:00'),
        ])
        self.assertEqual(extract_metadata(build_jpeg(app1_exif(tiff))).date, '2024-09-01T08:00:00Z')

    def test_first_exif_segment_wins(self) -> None:
        first = build_tiff([ascii_entry(0x010E, 'First')])
        second = build_tiff([ascii_entry(0x010E, 'Second'), ascii_entry(0x0132, '2024:09:01 08:00:00')])
        metadata = extract_metadata(build_jpeg(app1_exif(first), app1_exif(second)))
        self.assertEqual(metadata.caption, 'First')
        self.assertEqual(metadata.date, '2024-09-01T08:00:00Z')

    def test_iptc_place_without_gps(self) -> None:
        iptc = app13_iptc([iptc_dataset(0x5A, 'Pittsburgh'), iptc_dataset(0x65, 'USA')])
        metadata = extract_metadata(build_jpeg(iptc))
        self.assertEqual(metadata.location, PlaceLocation(city='Pittsburgh', country='USA'))

    def test_webp(self) -> None:
        tiff = build_tiff([ascii_entry(0x010E, 'Harbor at dusk')], exif=[ascii_entry(0x9003, '2022:06:15 21:30:00')])
        data = build_webp(riff_chunk(b'VP8X', b'\x08' + b'\x00' * 9), riff_chunk(b'EXIF', tiff))
        metadata = extract_metadata(data, 'harbor.webp')
        self.assertEqual(metadata.date, '2022-06-15T21:30:00Z')
        self.assertEqual(metadata.caption, 'Harbor at dusk')
        self.assertEqual(metadata.caption_source, 'exif')

    def test_webp_odd_sized_chunk_before_exif(self) -> None:
        tiff = build_tiff([ascii_entry(0x0132, '2022:06:15 21:30:00')])
        data = build_webp(riff_chunk(b'ICCP', b'\x01' * 7), riff_chunk(b'EXIF', tiff))
        self.assertEqual(extract_metadata(data).date, '2022-06-15T21:30:00Z')

    def test_tiff_file(self) -> None:
        tiff = build_tiff([ascii_entry(0x010E, 'Scanned negative')], endian='>')
        self.assertEqual(extract_metadata(tiff, 'scan.tif').caption, 'Scanned negative')

    def test_cyclic_pointer_terminates(self) -> None:
        ifd0 = (
            struct.pack('<H', 1)
            + struct.pack('<HHII', 0x8769, 4, 1, 8)
            + struct.pack('<I', 0)
        )
        data = build_jpeg(app1_exif(b'II' + struct.pack('<HI', 42, 8) + ifd0))
        self.assertTrue(extract_metadata(data).is_empty())


class TestFileHelpers(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.path = Path(self.tmpdir.name) / 'concert.jpg'
        self.path.write_bytes(concert_jpeg() + b'\x00' * 100000)

    def test_read_metadata(self) -> None:
        metadata = read_metadata(self.path)
        self.assertEqual(metadata.date, '2024-08-29T20:15:00Z')
        self.assertEqual(read_metadata(str(self.path)), metadata)

    def test_read_prefix_is_bounded(self) -> None:
        self.assertEqual(len(read_prefix(self.path)), 65536)
        self.assertEqual(len(read_prefix(self.path, 100)), 100)

    def test_small_prefix_config(self) -> None:
        metadata = read_metadata(self.path, ExtractorConfig(max_prefix_bytes=20))
        self.assertIsNone(metadata.date)

    def test_missing_file(self) -> None:
        with self.assertRaises(MetadataReadError):
            read_metadata(Path(self.tmpdir.name) / 'missing.jpg')


if __name__ == "__main__":
    unittest.main()
