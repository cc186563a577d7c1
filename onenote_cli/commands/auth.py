"""Authentication related commands."""

from __future__ import annotations

import json  # used in cmd_auth_info to pretty print

from ..core import get_client, get_token_path, save_token


def cmd_auth_set(args):
    path = get_token_path()
    save_token(path, args.token)
    print(f"Saved access token to {path}")
    return 0


def cmd_auth_info(_args):
    client = get_client()
    data = client.get_json("/me")
    print(json.dumps(data, ensure_ascii=False, indent=2))
    return 0
