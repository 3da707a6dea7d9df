from __future__ import annotations
from parser import Node

ANDROID_NS = 'http://schemas.android.com/apk/res/android'

def namespace_prefixes(node: Node, namespace: str = ANDROID_NS) -> list[str]:
    prefixes = []
    current = node
    while current is not None:
        for attr_name, attr_value in current.attributes.items():
            if attr_name.startswith('xmlns:') and attr_value.strip() == namespace:
                prefix = attr_name[len('xmlns:'):]
                if prefix not in prefixes:
                    prefixes.append(prefix)
        current = current.parent
    return prefixes

def resolve_attribute(node: Node, local_name: str, namespace: str = ANDROID_NS) -> str | None:
    prefixes = namespace_prefixes(node, namespace)
    # undeclared documents still use the conventional prefix
    if 'android' not in prefixes:
        prefixes.append('android')

    for prefix in prefixes:
        value = node.attributes.get(f"{prefix}:{local_name}")
        if value is not None:
            return value

    return node.attributes.get(local_name)
