#!/usr/bin/env python3
"""Load a post's discussion through the client facade and print it.

Usage:
    REMOTE__ACCESS_TOKEN=alice-token REMOTE__VIEWER_ID=alice \
        python scripts/show_thread.py welcome [--react like]
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence

from discuss.application import DiscussionFacadeFactory
from discuss.config import Settings
from discuss.domain.model import CommentNode, ReactionSnapshot
from discuss.domain.value import PostId, ReactionCategory
from discuss.util.di.container import create_container
from discuss.util.logging import get_logger, setup_logging
from discuss.util.observability import configure_logfire, instrument_httpx

logger = get_logger(__name__)


def _summary(snapshot: ReactionSnapshot) -> str:
    counts = " ".join(
        f"{category.value}={snapshot.counts[category]}"
        for category in ReactionCategory.ordered()
        if snapshot.counts[category]
    )
    mine = ""
    if snapshot.viewer_reaction:
        mine = f" (you: {snapshot.viewer_reaction.value})"
    return f"[{snapshot.total}{' ' + counts if counts else ''}]{mine}"


def _print_tree(nodes: Sequence[CommentNode]) -> None:
    stack = [(node, 0) for node in reversed(nodes)]
    while stack:
        node, depth = stack.pop()
        print(
            f"{'  ' * depth}- {node.author_display.name}: {node.content} "
            f"{_summary(node.reaction_state)}"
        )
        stack.extend((child, depth + 1) for child in reversed(node.children))


async def run(post_id: PostId, react: ReactionCategory | None) -> int:
    container = create_container()
    try:
        async with container() as request_container:
            factory = await request_container.get(DiscussionFacadeFactory)
            facade = factory.open(post_id)
            try:
                outcome = await facade.load_thread()
                if not outcome.ok:
                    logger.error(f"Could not load thread: {outcome.message}")
                    return 1

                if react is not None:
                    reacted = await facade.react(facade.post_entity, react)
                    if not reacted.ok:
                        logger.error(f"Reaction failed: {reacted.message}")

                print(f"Post {post_id} {_summary(facade.snapshot(facade.post_entity))}")
                _print_tree(facade.tree)
                return 0
            finally:
                facade.close()
    finally:
        await container.close()


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("post_id")
    parser.add_argument(
        "--react",
        choices=[category.value for category in ReactionCategory],
        help="Toggle a reaction on the post before printing",
    )
    args = parser.parse_args()

    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings, service_name="discuss-client")
    instrument_httpx()

    react = ReactionCategory(args.react) if args.react else None
    return asyncio.run(run(PostId(args.post_id), react))


if __name__ == "__main__":
    sys.exit(main())
