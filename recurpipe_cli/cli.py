import argparse
import logging
from itertools import islice

from dateutil.parser import isoparse

from recurpipe import RecurrenceRule, RecurrenceError, SettingValidationError, instant

INT_PARTS = ("bymonth", "byweekno", "byyearday", "bymonthday", "byhour", "byminute", "bysecond", "bysetpos")


def int_list(value):
    try:
        return [int(v) for v in value.split(",") if v.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError("expected a comma separated list of integers: %r" % value)


def token_list(value):
    return [v.strip() for v in value.split(",") if v.strip()]


def parse_date(value):
    try:
        parsed = isoparse(value)
    except ValueError:
        raise argparse.ArgumentTypeError("invalid ISO 8601 date: %r" % value)
    # date-only input means an all-day rule
    if len(value.strip()) <= 10:
        return parsed.date()
    return parsed


def build_parser():
    recurpipe_argparse = argparse.ArgumentParser(
        prog="recurpipe-expand",
        description="Expand a recurrence rule into its instances, one per line.",
    )
    recurpipe_argparse.add_argument("--freq", required=True, help="SECONDLY ... YEARLY")
    recurpipe_argparse.add_argument("--start", required=True, type=parse_date, help="first instance, ISO 8601")
    recurpipe_argparse.add_argument("--interval", type=int, default=1)
    bounds = recurpipe_argparse.add_mutually_exclusive_group()
    bounds.add_argument("--count", type=int)
    bounds.add_argument("--until", type=parse_date)
    recurpipe_argparse.add_argument("--wkst", help='week start, "MO" to "SU"')
    recurpipe_argparse.add_argument("--byday", type=token_list, help='e.g. "MO,WE" or "-1FR"')
    for part in INT_PARTS:
        recurpipe_argparse.add_argument("--" + part, type=int_list)
    recurpipe_argparse.add_argument(
        "--limit", type=int, default=20, help="maximum number of instances to print"
    )
    recurpipe_argparse.add_argument(
        "--include-start", action="store_true", help="always print the start first"
    )
    recurpipe_argparse.add_argument("--verbose", action="store_true")
    return recurpipe_argparse


def entrance(argv=None):
    recurpipe_argparse = build_parser()
    args = recurpipe_argparse.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    parts = {part: getattr(args, part) for part in INT_PARTS if getattr(args, part)}
    try:
        rule = RecurrenceRule(
            args.freq,
            interval=args.interval,
            count=args.count,
            until=args.until,
            week_start=args.wkst,
            byday=args.byday,
            settings={"INCLUDE_START": args.include_start},
            **parts
        )
        iterator = rule.iterator(args.start)
    except (ValueError, TypeError, SettingValidationError) as e:
        recurpipe_argparse.error(f"recurpipe-expand: {e}")

    try:
        for value in islice(iterator, args.limit):
            print(instant.to_datetime(value).isoformat())
    except RecurrenceError as e:
        logging.error(f"recurpipe-expand: {e}")
        return 1
    return 0
