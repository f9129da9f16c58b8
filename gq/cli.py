# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations
import argparse, json, pathlib, random, sys
from gq.errors import GqError
from gq.seed import seed_store
from gq.stores.factory import get_store
from gq.service import (
    list_groups as svc_list_groups,
    list_members as svc_list_members,
    get_group as svc_get_group,
    dump_store as svc_dump_store,
    load_store as svc_load_store,
)
from gq.config import get_cfg

store = get_store(get_cfg())

def _print(out) -> None:
    print(json.dumps(out, ensure_ascii=False))

def _load(args) -> None:
    if getattr(args, "data", None):
        data = json.loads(pathlib.Path(args.data).read_text(encoding="utf-8"))
        svc_load_store(store, data)

def cmd_seed(args):
    rng = random.Random(args.random_seed) if args.random_seed is not None else None
    seed_store(store, groups=args.groups, max_members=args.max_members, rng=rng)
    dump = svc_dump_store(store)
    if args.output:
        pathlib.Path(args.output).write_text(json.dumps(dump, ensure_ascii=False), encoding="utf-8")
        _print({"ok": True, "output": args.output,
                "groups": len(dump["groups"]),
                "members": sum(len(p) for p in dump["members"].values())})
    else:
        _print(dump)

def cmd_list_groups(args):
    _load(args)
    limit = args.limit or get_cfg().page_limit("groups")
    out = svc_list_groups(store, args.page, limit, args.filter, args.sort)
    _print([g.model_dump() for g in out])

def cmd_list_members(args):
    _load(args)
    limit = args.limit or get_cfg().page_limit("members")
    out = svc_list_members(store, args.group_id, args.page, limit, args.filter, args.sort)
    _print([m.model_dump() for m in out])

def cmd_get_group(args):
    _load(args)
    _print(svc_get_group(store, args.group_id).model_dump())

def _query_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--data", help="JSON dump to load first (see `seed --output`)")
    p.add_argument("--page", type=int, default=1)
    p.add_argument("--limit", type=int)
    p.add_argument("--filter", help="name::regex|name2::regex2")
    p.add_argument("--sort", help="name|-name2 (- for descending)")

def main_cli(argv=None):
    p = argparse.ArgumentParser(prog="gqcli")
    sub = p.add_subparsers(dest="cmd", required=True)

    seed = get_cfg().seed_settings()
    p_seed = sub.add_parser("seed")
    p_seed.add_argument("--groups", type=int, default=seed.groups)
    p_seed.add_argument("--max-members", type=int, default=seed.max_members)
    p_seed.add_argument("--random-seed", type=int)
    p_seed.add_argument("--output", help="Write the JSON dump here instead of stdout")
    p_seed.set_defaults(func=cmd_seed)

    p_groups = sub.add_parser("list-groups")
    _query_args(p_groups)
    p_groups.set_defaults(func=cmd_list_groups)

    p_members = sub.add_parser("list-members")
    p_members.add_argument("group_id", type=int)
    _query_args(p_members)
    p_members.set_defaults(func=cmd_list_members)

    p_get = sub.add_parser("get-group")
    p_get.add_argument("group_id", type=int)
    p_get.add_argument("--data", help="JSON dump to load first")
    p_get.set_defaults(func=cmd_get_group)

    args = p.parse_args(argv)
    try:
        return args.func(args)
    except GqError as e:
        _print(e.to_dict())
        return 1

if __name__ == "__main__":
    sys.exit(main_cli())
