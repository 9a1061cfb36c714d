"""Configuration constants.

Values that are conventions of Codeception or of process handling and
should NOT be user-configurable. For configurable values, see models.py.
"""

# =============================================================================
# Codeception Project Layout
# =============================================================================

TESTS_DIR = "tests"
"""Test root directory inside a workspace folder."""

SUITE_FILE_SUFFIX = ".suite.yml"
"""Suite definition files live directly in the test root."""

TEST_FILE_SUFFIXES = ("Test.php", "Cest.php")
"""Test source file name suffixes inside a suite directory."""

CEST_FILE_SUFFIX = "Cest.php"

PROJECT_CONFIG_FILES = ("codeception.yml", "codeception.dist.yml")
"""Project configuration files that may declare the output directory."""

DEFAULT_OUTPUT_DIR = "tests/_output"
"""Output directory used when no project configuration declares one."""

VENDOR_BIN_DIR = "vendor/bin"
CODECEPT_COMMAND = "codecept"

# =============================================================================
# Report Files
# =============================================================================

JUNIT_REPORT_FILE = "report.xml"
PHPUNIT_REPORT_FILE = "phpunit-report.xml"

REPORT_FORMAT_FLAGS = {
    "junit": "--xml",
    "phpunit": "--phpunit-xml",
    "html": "--html",
}
"""Command line flag per report format, in emission order."""

# =============================================================================
# Process Handling
# =============================================================================

CANCELLED_EXIT_CODE = 130
"""Exit code reported for a run cancelled by the user (terminated by interrupt)."""

SPAWN_FAILURE_EXIT_CODE = 1
"""Exit code reported when the runner could not be spawned at all."""

DEFAULT_KILL_GRACE_SEC = 2.0
"""Wait between the graceful termination signal and the forceful kill."""

OUTPUT_NEWLINE = "\r\n"
"""Line ending for forwarded runner output. Terminal-style panels render it literally."""

