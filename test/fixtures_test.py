#!/usr/bin/env python
import os
from shutil import rmtree
from tempfile import mkdtemp
from unittest import TestCase

from awssigner.fixtures import load_csv_records
from awssigner.responselog import MemoryLogAppender

class LoadCSVRecords(TestCase):
    def setUp(self):
        self.tmpdir = mkdtemp()
        self.appender = MemoryLogAppender()

    def tearDown(self):
        rmtree(self.tmpdir)

    def write(self, name, content, mode="w"):
        path = os.path.join(self.tmpdir, name)
        with open(path, mode) as fd:
            fd.write(content)
        return path

    def test_records(self):
        path = self.write(
            "users.csv",
            "id,email\n1,a@example.com\n\n2,\"b,c@example.com\"\n")
        records = load_csv_records(path, self.appender)

        self.assertEqual(records, [
            {"id": "1", "email": "a@example.com"},
            {"id": "2", "email": "b,c@example.com"},
        ])
        self.assertEqual(
            self.appender.messages("debug"),
            ["Loaded 2 records from CSV: %s" % path])

    def test_header_only(self):
        path = self.write("empty.csv", "id,email\n")
        self.assertEqual(load_csv_records(path), [])

    def test_missing_file(self):
        path = os.path.join(self.tmpdir, "missing.csv")
        self.assertEqual(load_csv_records(path, self.appender), [])

        errors = self.appender.messages("errors")
        self.assertEqual(len(errors), 1)
        self.assertTrue(errors[0].startswith("CSV Load Failed for %s: " % path))

    def test_undecodable_file(self):
        path = self.write("bad.csv", b"id\n\xff\xfe\n", mode="wb")
        self.assertEqual(load_csv_records(path, self.appender), [])
        self.assertEqual(len(self.appender.messages("errors")), 1)

    def test_records_usable_as_variables(self):
        from awssigner.template import resolve_template

        path = self.write("ids.csv", "userId\n77\n")
        record = load_csv_records(path)[0]
        self.assertEqual(
            resolve_template("/users/{{ userId }}", record), "/users/77")
