import site
import pathlib

test_dir = pathlib.Path(__file__).resolve().parent
root_path = test_dir.parent.parent
site.addsitedir(root_path)

import unittest
from datetime import date
from io import BytesIO

from jhu_csse_collector.exceptions import (
    CollectorError, ParseError, FieldError, AlignmentError
)
from jhu_csse_collector.parser import WideCsvReader, PairedRowReader, parse_dates


CONFIRMED = b"""\
Province,Country,Lat,Long,1/22/20,1/23/20,1/24/20
,Testland,10.0,20.0,5,8,8
North,Otherland,-1.5,30.25,1,3,2
South,Otherland,-2.5,31.25,0,0,4
"""

DEATHS = b"""\
Province,Country,Lat,Long,1/22/20,1/23/20,1/24/20
,Testland,10.0,20.0,0,1,1
North,Otherland,-1.5,30.25,0,0,1
South,Otherland,-2.5,31.25,0,0,0
"""


def reader(data: bytes, chunk_size=500) -> WideCsvReader:
    return WideCsvReader(BytesIO(data), chunk_size=chunk_size)


class TestParseDates(unittest.TestCase):
    def test_month_day_year(self):
        self.assertEqual(
            parse_dates(["1/22/20", "12/3/21", "03/09/22"]),
            [date(2020, 1, 22), date(2021, 12, 3), date(2022, 3, 9)]
        )

    def test_invalid_label(self):
        with self.assertRaises(FieldError) as context:
            parse_dates(["1/22/20", "2020-01-23"])

        self.assertEqual(context.exception.column, 5)


class TestWideCsvReader(unittest.TestCase):
    def test_header_and_dates(self):
        with reader(CONFIRMED) as source:
            self.assertEqual(
                source.header,
                ["Province", "Country", "Lat", "Long", "1/22/20", "1/23/20", "1/24/20"]
            )
            self.assertEqual(
                source.dates,
                [date(2020, 1, 22), date(2020, 1, 23), date(2020, 1, 24)]
            )

    def test_rows(self):
        with reader(CONFIRMED) as source:
            chunks = list(source)

        self.assertEqual(len(chunks), 1)
        locations, counts = chunks[0]

        self.assertEqual(list(locations.province), ["", "North", "South"])
        self.assertEqual(list(locations.country), ["Testland", "Otherland", "Otherland"])
        self.assertEqual(list(locations.country_slug), ["testland", "otherland", "otherland"])
        self.assertEqual(list(locations.latitude), [10.0, -1.5, -2.5])
        self.assertEqual(list(locations.longitude), [20.0, 30.25, 31.25])

        self.assertEqual(list(counts.columns), [date(2020, 1, 22), date(2020, 1, 23), date(2020, 1, 24)])
        self.assertEqual(counts.values.tolist(), [[5, 8, 8], [1, 3, 2], [0, 0, 4]])
        self.assertEqual(str(counts.dtypes.iloc[0]), "int64")

    def test_chunks_keep_source_row_positions(self):
        with reader(CONFIRMED, chunk_size=2) as source:
            chunks = list(source)

        self.assertEqual([chunk.locations.shape[0] for chunk in chunks], [2, 1])
        self.assertEqual(list(chunks[0].locations.index), [0, 1])
        self.assertEqual(list(chunks[1].locations.index), [2])
        self.assertEqual(list(chunks[1].counts.index), [2])

    def test_quoted_fields(self):
        data = (
            b'Province,Country,Lat,Long,1/22/20\n'
            b'"Bonaire, Sint Eustatius and Saba",Netherlands,12.1784,-68.2385,3\n'
        )

        with reader(data) as source:
            locations, counts = next(source)

        self.assertEqual(locations.province.iloc[0], "Bonaire, Sint Eustatius and Saba")
        self.assertEqual(counts.iloc[0, 0], 3)

    def test_not_restartable(self):
        source = reader(CONFIRMED)

        self.assertEqual(len(list(source)), 1)
        self.assertEqual(list(source), [])

    def test_invalid_latitude(self):
        data = CONFIRMED.replace(b"-1.5", b"north")

        with self.assertRaises(FieldError) as context:
            list(reader(data))

        self.assertEqual(context.exception.row, 2)
        self.assertEqual(context.exception.column, 2)

    def test_empty_longitude(self):
        data = CONFIRMED.replace(b",31.25,", b",,")

        with self.assertRaises(FieldError) as context:
            list(reader(data))

        self.assertEqual(context.exception.row, 3)
        self.assertEqual(context.exception.column, 3)

    def test_invalid_count(self):
        data = CONFIRMED.replace(b"1,3,2", b"1,3.5,2")

        with self.assertRaises(FieldError) as context:
            list(reader(data))

        self.assertEqual(context.exception.row, 2)
        self.assertEqual(context.exception.column, 5)

    def test_negative_and_empty_counts_are_rejected(self):
        for replacement in [b"1,-3,2", b"1,,2"]:
            with self.subTest(replacement=replacement):
                with self.assertRaises(FieldError):
                    list(reader(CONFIRMED.replace(b"1,3,2", replacement)))

    def test_count_too_large(self):
        data = b"P,C,Lat,Long,1/22/20\n,Testland,1.0,2.0,99999999999999999999\n"

        with self.assertRaises(FieldError) as context:
            list(reader(data))

        self.assertEqual(context.exception.row, 1)
        self.assertEqual(context.exception.column, 4)

    def test_count_bounds(self):
        data = b"P,C,Lat,Long,1/22/20,1/23/20\n,Testland,1.0,2.0,%s,%s\n"

        with reader(data % (b"00042", b"9223372036854775807")) as source:
            _, counts = next(source)

        self.assertEqual(counts.values.tolist(), [[42, 9223372036854775807]])

        with self.assertRaises(FieldError) as context:
            list(reader(data % (b"1", b"9223372036854775808")))

        self.assertEqual(context.exception.column, 5)

    def test_repeated_date_label(self):
        data = b"Province,Country,Lat,Long,1/22/20,1/23/20,1/22/20\n,Testland,1.0,2.0,1,2,3\n"

        with self.assertRaises(ParseError) as context:
            reader(data)

        self.assertIn("'1/22/20'", str(context.exception))
        self.assertNotIn("1/22/20.1", str(context.exception))

    def test_repeated_date_spelled_differently(self):
        data = b"Province,Country,Lat,Long,1/22/20,01/22/20\n,Testland,1.0,2.0,1,2\n"

        with self.assertRaises(ParseError) as context:
            reader(data)

        self.assertIn("'01/22/20'", str(context.exception))

    def test_invalid_date_label(self):
        data = CONFIRMED.replace(b"1/24/20", b"Jan 24")

        with self.assertRaises(FieldError):
            reader(data)

    def test_empty_document(self):
        with self.assertRaises(ParseError):
            reader(b"")

    def test_too_few_header_columns(self):
        with self.assertRaises(ParseError):
            reader(b"Province,Country,Lat\n,Testland,1.0\n")

    def test_row_with_too_many_fields(self):
        data = CONFIRMED.replace(b"0,0,4", b"0,0,4,9")

        with self.assertRaises(ParseError):
            list(reader(data))

    def test_row_with_too_few_fields(self):
        # Short rows are either flagged as such or fail conversion
        # of their missing fields; both abort the read.
        data = CONFIRMED.replace(b"0,0,4", b"0,0")

        with self.assertRaises(CollectorError):
            list(reader(data))

    def test_unterminated_quote(self):
        data = CONFIRMED + b'"Unterminated,Testland,1.0,1.0,1,1,1\n'

        with self.assertRaises(ParseError):
            list(reader(data))

    def test_header_only(self):
        data = b"Province,Country,Lat,Long,1/22/20\n"

        try:
            source = reader(data)
        except ParseError:
            # Some pandas versions do not yield an empty first chunk.
            return

        self.assertEqual(source.dates, [date(2020, 1, 22)])
        self.assertEqual(list(source), [])


class TestPairedRowReader(unittest.TestCase):
    def test_aligned_streams(self):
        paired = PairedRowReader(reader(CONFIRMED, 2), reader(DEATHS, 2))
        pairs = list(paired)

        self.assertEqual(len(pairs), 2)

        confirmed, deaths = pairs[0]
        self.assertEqual(confirmed.counts.values.tolist(), [[5, 8, 8], [1, 3, 2]])
        self.assertEqual(deaths.counts.values.tolist(), [[0, 1, 1], [0, 0, 1]])

    def test_second_stream_shorter(self):
        deaths = b"\n".join(DEATHS.splitlines()[:2]) + b"\n"

        for chunk_size in (1, 500):
            with self.subTest(chunk_size=chunk_size):
                paired = PairedRowReader(reader(CONFIRMED, chunk_size), reader(deaths, chunk_size))

                with self.assertRaises(AlignmentError):
                    list(paired)

    def test_first_stream_shorter(self):
        confirmed = b"\n".join(CONFIRMED.splitlines()[:3]) + b"\n"
        paired = PairedRowReader(reader(confirmed, 1), reader(DEATHS, 1))

        with self.assertRaises(AlignmentError):
            list(paired)

    def test_locations_out_of_order(self):
        lines = DEATHS.splitlines()
        deaths = b"\n".join([lines[0], lines[1], lines[3], lines[2]]) + b"\n"
        paired = PairedRowReader(reader(CONFIRMED), reader(deaths))

        with self.assertRaises(AlignmentError):
            list(paired)

    def test_header_dates_differ(self):
        # The two headers are compared before any row is paired.
        deaths = DEATHS.replace(b"1/24/20", b"1/25/20")

        with self.assertRaises(AlignmentError):
            PairedRowReader(reader(CONFIRMED), reader(deaths))

    def test_header_date_counts_differ(self):
        deaths = b"\n".join(
            line.rsplit(b",", 1)[0]
            for line in DEATHS.splitlines()
        ) + b"\n"

        with self.assertRaises(AlignmentError):
            PairedRowReader(reader(CONFIRMED), reader(deaths))

    def test_different_chunk_sizes(self):
        with self.assertRaises(ValueError):
            PairedRowReader(reader(CONFIRMED, 1), reader(DEATHS, 2))


if __name__ == '__main__':
    unittest.main()
