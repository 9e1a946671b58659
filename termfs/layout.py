#!/usr/bin/env python3
"""
Starter directory layout and text rendering of directory trees.
"""

from typing import Any, Dict, List

from .node import Node

STAMP = "23.03.2024 02:54"


def _dir(name: str, *children: Dict[str, Any]) -> Dict[str, Any]:
    return {'name': name, 'kind': 'dir', 'permissions': 'rwxr-xr-x',
            'modified': STAMP, 'children': list(children)}


def _file(name: str, payload: str, kind: str = 'file', mime: str = 'text/plain',
          permissions: str = 'rw-r--r--') -> Dict[str, Any]:
    return {'name': name, 'kind': kind, 'permissions': permissions,
            'modified': STAMP, 'mime': mime, 'payload': payload}


def _exec(name: str, description: str) -> Dict[str, Any]:
    return _file(name, f"#!/bin/bash\n# {description}", kind='exec',
                 mime='application/x-executable', permissions='rwxr-xr-x')


DEFAULT_LAYOUT: Dict[str, Any] = _dir(
    '~',
    _dir('bin',
         _exec('bash', 'Bash shell executable'),
         _exec('ls', 'List directory contents'),
         _exec('cat', 'Display file contents')),
    _dir('etc',
         _file('passwd', "root:x:0:0:root:/root:/bin/bash\n"
                         "demo:x:1000:1000:Demo User:/home/demo:/bin/bash\n"
                         "guest:x:1001:1001:Guest User:/home/guest:/bin/bash"),
         _file('hosts', "127.0.0.1\tlocalhost\n"
                        "127.0.1.1\tterminal-emulator\n"
                        "::1\tlocalhost ip6-localhost ip6-loopback"),
         _file('nginx.conf', "# Nginx configuration\n"
                             "server {\n    listen 80;\n    server_name localhost;\n"
                             "    root /var/www;\n    index index.html;\n}",
               kind='config')),
    _dir('home',
         _dir('demo',
              _file('.profile', "export PATH=/bin:/usr/bin\n"),
              _file('README.md', "# Welcome\n\nThis is a virtual namespace.\n",
                    mime='text/markdown'),
              _dir('projects'))),
    _dir('tmp'),
    _dir('var',
         _dir('log', _file('syslog', "")),
         _dir('www', _file('index.html', "<h1>It works!</h1>\n", mime='text/html'))),
)


def format_tree(node: Node, show_files: bool = False) -> str:
    """Render the subtree under ``node`` with box-drawing connectors.

    Children are sorted by name. Only directories are shown unless
    ``show_files`` is set.
    """
    lines: List[str] = []

    def walk(current: Node, prefix: str) -> None:
        children = [c for c in current.children if show_files or c.is_dir]
        children.sort(key=lambda c: c.name)
        for i, child in enumerate(children):
            last = i == len(children) - 1
            lines.append(f"{prefix}{'┗━━ ' if last else '┣━━ '}{child.name}")
            if child.is_dir:
                walk(child, prefix + ('    ' if last else '┃   '))

    walk(node, '')
    return '\n'.join(lines)
