from licheck.headers import HeaderReport
from licheck.messages import heading, path_list, success


def _report_failures(report: HeaderReport) -> None:
    if report.failed:
        heading("Files that could not be processed:")
        for path, message in report.failed:
            print(f"  {path.as_posix()} ({message})")


def report_check(report: HeaderReport) -> None:
    if report.ok:
        success("All files have valid up to date copyright header")
        return

    if report.missing:
        heading("Files missing copyright header:")
        path_list(report.missing)
    if report.stale:
        heading("Files with out-of-date copyright header:")
        path_list(report.stale)
    _report_failures(report)
    print()


def report_update(report: HeaderReport) -> None:
    if report.ok:
        success("No updates necessary, all files have valid up to date copyright/license header")
        return

    if report.missing:
        heading("Added copyright/license header to:")
        path_list(report.missing)
    if report.stale:
        heading("Updated copyright/license header in:")
        path_list(report.stale)
    _report_failures(report)
    print()
