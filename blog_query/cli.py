from __future__ import annotations

import argparse
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Sequence

from .aggregates import category_counts, tag_counts
from .config import config_sha256, load_config, resolve_content_root
from .config_schema import AppConfig
from .content import ContentStore
from .errors import ConfigError, ContentError, PostNotFoundError
from .event_log import EventLog
from .normalize import normalize_posts
from .paginate import page_count
from .query import PostQuery, adjacent_posts, find_post, run_query
from .reading_time import reading_time_minutes
from .seo import image_from_record, render_head
from .sorting import SORT_KEYS
from .validate import check_frontmatter


@dataclass(frozen=True)
class _Context:
    config: AppConfig
    store: ContentStore
    collection: str
    log: EventLog


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return n


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return n


def _build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", help="Path to YAML config file (defaults apply when omitted).")
    common.add_argument("--content", help="Content root directory; overrides content.root.")
    common.add_argument("--collection", default="blog", help="Collection to query.")
    common.add_argument("--log", help="Append JSONL events to this file.")

    parser = argparse.ArgumentParser(prog="blog_query")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lst = subparsers.add_parser("list", parents=[common], help="Filter, sort, and page posts.")
    lst.add_argument("--search", help="Case-insensitive text search.")
    lst.add_argument(
        "--search-body",
        action="store_true",
        help="Also search the post body text.",
    )
    lst.add_argument("--category", help="Exact category match.")
    lst.add_argument("--author", help="Exact author match.")
    lst.add_argument("--tag", help="Exact tag match.")
    lst.add_argument(
        "--any-tag",
        action="append",
        default=[],
        help="Match posts carrying any of these tags (repeatable).",
    )
    lst.add_argument("--from", dest="date_from", help="Earliest date, inclusive (ISO-8601).")
    lst.add_argument("--to", dest="date_to", help="Latest date, inclusive (ISO-8601).")
    lst.add_argument("--sort", choices=SORT_KEYS, help="Sort order.")
    lst.add_argument("--limit", type=int, help="Maximum number of posts.")
    lst.add_argument("--skip", type=_non_negative_int, default=0, help="Posts to skip.")
    lst.add_argument("--page", type=_positive_int, help="1-based page using listing.page_size.")
    lst.add_argument("--include-drafts", action="store_true", help="Also list draft posts.")
    lst.set_defaults(_handler=_cmd_list)

    show = subparsers.add_parser("show", parents=[common], help="Show one post by slug.")
    show.add_argument("slug")
    show.set_defaults(_handler=_cmd_show)

    facets = subparsers.add_parser(
        "facets", parents=[common], help="List categories and tags with counts."
    )
    facets.set_defaults(_handler=_cmd_facets)

    check = subparsers.add_parser(
        "check", parents=[common], help="Report documents with missing or malformed frontmatter."
    )
    check.set_defaults(_handler=_cmd_check)

    meta = subparsers.add_parser("meta", parents=[common], help="Render SEO head tags for a post.")
    meta.add_argument("slug")
    meta.set_defaults(_handler=_cmd_meta)

    return parser


def _eprint(message: str) -> None:
    print(message, file=sys.stderr)


def _print_json(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _open_context(args: argparse.Namespace, log: EventLog) -> _Context:
    config_path = getattr(args, "config", None)
    cfg = load_config(config_path) if config_path else AppConfig()

    content_arg = getattr(args, "content", None)
    root = Path(content_arg) if content_arg else resolve_content_root(cfg, config_path)

    log.info(
        "config_loaded",
        config_path=config_path,
        config_hash=config_sha256(cfg),
        content_root=str(root),
    )

    store = ContentStore.from_config(cfg, root, log=log)
    return _Context(
        config=cfg,
        store=store,
        collection=args.collection,
        log=log.bind(collection=args.collection),
    )


def _cmd_list(args: argparse.Namespace, ctx: _Context) -> int:
    listing = ctx.config.listing

    limit = args.limit
    skip = args.skip
    if args.page is not None:
        limit = listing.page_size
        skip = (args.page - 1) * listing.page_size

    query = PostQuery(
        search=args.search,
        search_body=bool(args.search_body),
        category=args.category,
        author=args.author,
        tag=args.tag,
        any_tags=tuple(args.any_tag),
        date_from=args.date_from,
        date_to=args.date_to,
        include_drafts=bool(args.include_drafts or listing.include_drafts),
        sort=args.sort or listing.default_sort,
        limit=limit,
        skip=skip,
    )

    result = run_query(ctx.store.load(ctx.collection), query)
    ctx.log.info(
        "query_completed",
        total=result.total,
        returned=len(result.posts),
        query=query.model_dump(mode="json", exclude_defaults=True),
    )

    payload = result.to_dict()
    if args.page is not None:
        payload["page"] = args.page
        payload["pages"] = page_count(result.total, listing.page_size)
    _print_json(payload)
    return 0


def _cmd_show(args: argparse.Namespace, ctx: _Context) -> int:
    posts = normalize_posts(ctx.store.load(ctx.collection))
    post = find_post(posts, args.slug)

    visible = [p for p in posts if not p.draft or p.slug == post.slug]
    previous, following = adjacent_posts(visible, post.slug, sort=ctx.config.listing.default_sort)

    payload = post.to_dict()
    payload["reading_time_minutes"] = reading_time_minutes(
        post, words_per_minute=ctx.config.reading.words_per_minute
    )
    payload["previous"] = previous.path if previous else None
    payload["next"] = following.path if following else None
    _print_json(payload)
    return 0


def _cmd_facets(args: argparse.Namespace, ctx: _Context) -> int:
    posts = normalize_posts(ctx.store.load(ctx.collection))
    if not ctx.config.listing.include_drafts:
        posts = [p for p in posts if not p.draft]

    _print_json(
        {
            "categories": [{"name": k, "count": n} for k, n in category_counts(posts)],
            "tags": [{"name": k, "count": n} for k, n in tag_counts(posts)],
        }
    )
    return 0


def _cmd_check(args: argparse.Namespace, ctx: _Context) -> int:
    records = ctx.store.load(ctx.collection)

    reports: list[dict[str, Any]] = []
    for record in records:
        result = check_frontmatter(record)
        if result.valid:
            continue
        reports.append(
            {
                "id": record.get("id"),
                "problems": list(result.problems),
                "detail": record.get("_frontmatter_error"),
            }
        )
        ctx.log.warning(
            "frontmatter_check_failed",
            document=record.get("id"),
            problems=list(result.problems),
        )

    _print_json({"checked": len(records), "invalid": len(reports), "documents": reports})
    return 5 if reports else 0


def _cmd_meta(args: argparse.Namespace, ctx: _Context) -> int:
    records = ctx.store.load(ctx.collection)
    posts = normalize_posts(records)
    post = find_post(posts, args.slug)
    record = records[posts.index(post)]

    print(render_head(post, ctx.config.site, image=image_from_record(record)))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        with EventLog.open(getattr(args, "log", None)) as log:
            log.info("command_started", command=args.command)
            try:
                ctx = _open_context(args, log)
                handler = getattr(args, "_handler")
                code = int(handler(args, ctx))
            except Exception as e:
                log.exception("command_failed", exc=e, command=args.command)
                raise
            log.info("command_completed", command=args.command, exit_code=code)
            return code
    except ConfigError as e:
        _eprint(str(e))
        return 2
    except ContentError as e:
        _eprint(str(e))
        return 3
    except PostNotFoundError as e:
        _eprint(str(e))
        return 4
    except KeyboardInterrupt:
        _eprint("Interrupted")
        return 130
    except Exception as e:
        _eprint(f"Unexpected error: {e}")
        return 1
