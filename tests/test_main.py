import gzip
import os
import tempfile
import unittest

from click.testing import CliRunner

from logpattern.__main__ import main


LINES = [
    "2023-05-01 10:22:31 sshd[1234]: Accepted password",
    "not a log line",
    "2023-05-01 10:22:32 cron[42]: job started",
]


class TestMain(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dirname = self._tmp.name
        self.logfile = os.path.join(self.dirname, "app.log")
        with open(self.logfile, "w") as f:
            f.write("\n".join(LINES) + "\n")
        self.runner = CliRunner()

    def tearDown(self):
        self._tmp.cleanup()

    def test_file(self):
        result = self.runner.invoke(main, ["-i", "%t %n[%p]: %m",
                                           "-o", "%n/%p %m", self.logfile])
        assert result.exit_code == 0, result.output
        assert result.output == "sshd/1234 Accepted password\ncron/42 job started\n"

    def test_stdin(self):
        result = self.runner.invoke(main, ["--preset", "simple"],
                                    input="\n".join(LINES) + "\n")
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            "2023-05-01T10:22:31Z sshd[1234]: Accepted password",
            "2023-05-01T10:22:32Z cron[42]: job started",
        ]

    def test_gzip(self):
        fp = os.path.join(self.dirname, "app.log.gz")
        with gzip.open(fp, "wt") as f:
            f.write("\n".join(LINES) + "\n")
        result = self.runner.invoke(main, ["-p", "simple", "-o", "%n", fp])
        assert result.exit_code == 0, result.output
        assert result.output == "sshd\ncron\n"

    def test_object(self):
        result = self.runner.invoke(main, ["-p", "simple", "-t", "object",
                                           self.logfile])
        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert len(lines) == 2
        assert lines[0].startswith("1: {")
        assert "'process': 'sshd'" in lines[0]
        assert lines[1].startswith("2: {")

    def test_config(self):
        fp = os.path.join(self.dirname, "sources.conf")
        with open(fp, "w") as f:
            f.write("[source:app]\n"
                    "file = app.log\n"
                    "format = %t %n[%p]: %m\n"
                    "output = %p\n")
        result = self.runner.invoke(main, ["-c", fp])
        assert result.exit_code == 0, result.output
        assert result.output == "1234\n42\n"

        result = self.runner.invoke(main, ["-c", fp, "-s", "other"])
        assert result.exit_code != 0

    def test_invalid_pattern(self):
        result = self.runner.invoke(main, ["-i", "%x", self.logfile])
        assert result.exit_code == 1
        assert "invalid pattern" in result.output

    def test_unknown_preset(self):
        result = self.runner.invoke(main, ["-p", "nothing", self.logfile])
        assert result.exit_code != 0

    def test_missing_file(self):
        missing = os.path.join(self.dirname, "missing.log")
        result = self.runner.invoke(main, [missing])
        assert result.exit_code != 0
