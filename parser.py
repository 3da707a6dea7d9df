from __future__ import annotations
import re
import html
from errors import IoError, SchemaError

xml_pattern = re.compile(r'(<(?:[^>"\']|"[^"]*"|\'[^\']*\')*>)', flags=re.DOTALL | re.MULTILINE)
comment_pattern = re.compile(r'\<!--.*?--\>', flags=re.DOTALL | re.MULTILINE)
first_word_pattern = re.compile(r'^\s*[/!?]*\s*([\w:.-]+)')

ROOT_TAG = 'vector'

def is_self_terminating(element: str) -> bool:
    return element.rstrip().endswith('/>')

def is_terminator(element: str) -> bool:
    return element.strip().startswith('</')

def is_structural(element: str) -> bool:
    content = element.lstrip()
    return not (content.startswith('<?') or content.startswith('<!'))

def get_tag(element: str) -> str:
    content = element.strip()
    if content.startswith('</'):
        content = content[2:]
    elif content.startswith('<'):
        content = content[1:]
    if content.endswith('>'):
        content = content[:-1]
    if content.endswith('/'):
        content = content[:-1]

    match = first_word_pattern.search(content)
    if match:
        return match.group(1)
    return ""

def parse_attributes(element: str) -> dict:
    attributes = {}

    content = element.strip()
    if content.startswith('</'):
        return attributes
    if content.startswith('<'):
        content = content[1:]
    if content.endswith('>'):
        content = content[:-1]
    if content.endswith('/'):
        content = content[:-1].rstrip()

    parts = content.split(None, 1)
    if len(parts) < 2:
        return attributes

    attr_string = parts[1]

    state = 0
    quote = ''
    accumulator = ""
    current_key = ""

    for char in attr_string:
        if state == 0:
            if char == '=':
                current_key = accumulator.strip()
                accumulator = ""
                state = 1
            elif not char.isspace():
                accumulator += char
        elif state == 1:
            if char == '"' or char == "'":
                quote = char
                state = 2
        elif state == 2:
            if char == quote:
                attributes[current_key] = html.unescape(accumulator)
                accumulator = ""
                current_key = ""
                state = 0
            else:
                accumulator += char

    return attributes

def read_markup(stream) -> str:
    if isinstance(stream, (bytes, bytearray)):
        data = bytes(stream)
    else:
        try:
            data = stream.read()
        except OSError as e:
            raise IoError(f"Cannot read input stream: {e}") from e

    if data is None:
        raise IoError("Cannot open input stream.")
    if isinstance(data, str):
        return data

    try:
        return data.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise SchemaError(f"Input is not UTF-8 markup: {e}") from e

def tokenize(markup: str) -> list[str]:
    markup = comment_pattern.sub('', markup)
    return xml_pattern.findall(markup)

class Node:
    def __init__(self, element: str):
        self.element = element
        self.tag = get_tag(element)
        self.attributes = parse_attributes(element)
        self.children = []
        self.parent = None

    def add_node_child(self, new_node: 'Node'):
        new_node.parent = self
        self.children.append(new_node)
        return new_node

    def compare_tag(self, element: str) -> bool:
        return self.tag == get_tag(element)

    def iter(self):
        yield self
        for child in self.children:
            yield from child.iter()

def build_tree(entries: list[str], root_tag: str = ROOT_TAG) -> Node:
    structural = (x for x in entries if is_structural(x))

    first = next(structural, None)
    if first is None:
        raise SchemaError(f"No <{root_tag}> root element found")
    if is_terminator(first) or get_tag(first) != root_tag:
        raise SchemaError(f"Root element is not <{root_tag}>, found: <{get_tag(first)}>")

    root = Node(first)
    if is_self_terminating(first):
        return root

    r = root
    for element in structural:
        if r is None:
            break

        if is_terminator(element):
            if r.compare_tag(element):
                r = r.parent
            continue

        new_child = r.add_node_child(Node(element))
        if not is_self_terminating(element):
            r = new_child

    return root
