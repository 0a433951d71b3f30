""" Command line driver: runs story files against a set of starting facts. """

import sys
import argparse
import logging
import contextlib
from typing import TextIO

from barnacle import config, util
from barnacle.director import Director, Counters
from barnacle.facts import FactStore, TypeMismatchError
from barnacle.rule_parser import INT_RE, ParseError, load_file, parse_int, parse_bool


def apply_assignment(store:FactStore, assignment:str) -> None:
    """ applies NAME=VALUE to store

    VALUE is an int if it looks like one, a bool if it's true or false and a
    string otherwise, the same order the == condition uses. Ints must fit in
    32 bits like int literals in story text. """
    name, sep, value = assignment.partition("=")
    name = name.strip()
    value = value.strip()
    if not sep or not name:
        raise ValueError(f'expected NAME=VALUE, got "{assignment}"')
    if INT_RE.fullmatch(value):
        store.store_int(name, parse_int(value))
    elif value in ("true", "false"):
        store.store_bool(name, parse_bool(value))
    else:
        store.store_string(name, value)


def report(director:Director, out:TextIO) -> None:
    for story in director.story_engine.stories:
        status = "finished" if story.is_finished() else f'at beat "{story.active_beat.name}"' # type: ignore[union-attr]
        out.write(f'{story.name}: {story.active_beat_index}/{len(story.beats)} beats, {status}\n')
    for name in sorted(director.fact_store.facts):
        out.write(f'  {director.fact_store.facts[name]}\n')
    out.write(" ".join(f'{c.name.lower()}={director.counters[c]}' for c in Counters))
    out.write("\n")


def main() -> None:
    with contextlib.ExitStack() as context_stack:
        parser = argparse.ArgumentParser(description="run barnacle stories against some starting facts")
        parser.add_argument("stories", nargs="+", type=str,
                help="story definition files")
        parser.add_argument("-c", "--config", nargs="?", type=str, default=None,
                help="toml file overriding default settings")
        parser.add_argument("-s", "--set", action="append", default=[], dest="assignments",
                help="starting fact as NAME=VALUE, may be repeated")
        parser.add_argument("-t", "--ticks", type=int, default=None,
                help="max passes to run. default from Director.MAX_TICKS")

        args = parser.parse_args()

        if args.config:
            config_file = context_stack.enter_context(open(args.config, "rt"))
            config.load_config(config_file)

        logging.basicConfig(
                format=config.Settings.Logging.FORMAT,
                filename=config.Settings.Logging.FILENAME or None,
                level=config.Settings.Logging.LEVEL,
        )
        logger = logging.getLogger(util.fullname(Director))

        director = Director()
        for filename in args.stories:
            try:
                stories = load_file(filename)
            except ParseError as e:
                logger.error(f'skipping {filename}: {e}')
                continue
            for story in stories:
                director.add_story(story)

        for assignment in args.assignments:
            try:
                apply_assignment(director.fact_store, assignment)
            except (ValueError, TypeMismatchError) as e:
                parser.error(f'bad --set {assignment}: {e}')

        max_ticks = args.ticks if args.ticks is not None else config.Settings.Director.MAX_TICKS
        ticks = director.run(max_ticks)
        logger.info(f'ran {ticks} passes')

        report(director, sys.stdout)
        if not director.is_finished():
            sys.exit(1)


if __name__ == "__main__":
    main()
