from __future__ import annotations

import ast
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Definition:
	name: str
	kind: str  # "function", "method", "class"
	line: int
	end_line: int
	has_docstring: bool

	@property
	def is_public(self) -> bool:
		return not self.name.split(".")[-1].startswith("_")

	@property
	def length(self) -> int:
		return self.end_line - self.line + 1


def _definition(node: ast.AST, name: str, kind: str) -> Definition:
	return Definition(
		name=name,
		kind=kind,
		line=node.lineno,
		end_line=getattr(node, "end_lineno", None) or node.lineno,
		has_docstring=ast.get_docstring(node) is not None,
	)


def parse_definitions(path: str, text: str) -> Optional[List[Definition]]:
	"""Top-level functions, classes and their methods; None on syntax errors."""
	try:
		tree = ast.parse(text, filename=path)
	except (SyntaxError, ValueError):
		return None

	defs: List[Definition] = []
	for node in tree.body:
		if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
			defs.append(_definition(node, node.name, "function"))
		elif isinstance(node, ast.ClassDef):
			defs.append(_definition(node, node.name, "class"))
			for sub in node.body:
				if isinstance(sub, (ast.FunctionDef, ast.AsyncFunctionDef)):
					defs.append(_definition(sub, f"{node.name}.{sub.name}", "method"))
	return defs


def loop_depth(node: ast.AST, depth: int = 0) -> int:
	"""Deepest nesting of for/while loops below ``node``."""
	deepest = depth
	for child in ast.iter_child_nodes(node):
		child_depth = depth + 1 if isinstance(child, (ast.For, ast.AsyncFor, ast.While)) else depth
		deepest = max(deepest, loop_depth(child, child_depth))
	return deepest


def blocking_calls_in_async(path: str, text: str) -> List[int]:
	"""Line numbers of ``time.sleep`` calls made inside ``async def`` bodies."""
	try:
		tree = ast.parse(text, filename=path)
	except (SyntaxError, ValueError):
		return []

	lines: List[int] = []
	for node in ast.walk(tree):
		if not isinstance(node, ast.AsyncFunctionDef):
			continue
		for sub in ast.walk(node):
			if (
				isinstance(sub, ast.Call)
				and isinstance(sub.func, ast.Attribute)
				and sub.func.attr == "sleep"
				and isinstance(sub.func.value, ast.Name)
				and sub.func.value.id == "time"
			):
				lines.append(sub.lineno)
	return sorted(set(lines))


def deeply_nested_functions(path: str, text: str, threshold: int = 3) -> List[Definition]:
	"""Functions whose loops nest at least ``threshold`` levels deep."""
	try:
		tree = ast.parse(text, filename=path)
	except (SyntaxError, ValueError):
		return []

	found: List[Definition] = []
	for node in ast.walk(tree):
		if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)) and loop_depth(node) >= threshold:
			found.append(_definition(node, node.name, "function"))
	return sorted(found, key=lambda d: d.line)


LOOP_NODES = (ast.For, ast.AsyncFor, ast.While)

# Method names that usually mean a round trip to a database.
QUERY_METHODS = {"execute", "query", "find_one", "filter", "filter_by", "raw"}

STRING_BUILDERS = {"str", "repr", "format"}

BRANCH_NODES = (
	ast.If,
	ast.For,
	ast.AsyncFor,
	ast.While,
	ast.IfExp,
	ast.Try,
	ast.ExceptHandler,
	ast.BoolOp,
	ast.comprehension,
)


def _parse(path: str, text: str) -> Optional[ast.AST]:
	try:
		return ast.parse(text, filename=path)
	except (SyntaxError, ValueError):
		return None


def _inside_loops(tree: ast.AST) -> List[ast.AST]:
	"""Every node within a for/while body, once each, in source order."""
	seen: Dict[int, ast.AST] = {}
	for loop in ast.walk(tree):
		if not isinstance(loop, LOOP_NODES):
			continue
		for stmt in loop.body:
			for node in ast.walk(stmt):
				seen.setdefault(id(node), node)
	return sorted(seen.values(), key=lambda n: (getattr(n, "lineno", 0), getattr(n, "col_offset", 0)))


def call_name(call: ast.Call) -> str:
	"""``mod.func`` for attribute calls on a plain name, else the bare name."""
	func = call.func
	if isinstance(func, ast.Attribute):
		if isinstance(func.value, ast.Name):
			return f"{func.value.id}.{func.attr}"
		return func.attr
	if isinstance(func, ast.Name):
		return func.id
	return ""


def sleeps_in_loops(path: str, text: str) -> List[int]:
	"""Line numbers of ``time.sleep``/``sleep`` calls inside loop bodies."""
	tree = _parse(path, text)
	if tree is None:
		return []
	return sorted({
		node.lineno
		for node in _inside_loops(tree)
		if isinstance(node, ast.Call) and call_name(node) in ("time.sleep", "sleep")
	})


def _is_stringy(node: ast.AST) -> bool:
	if isinstance(node, ast.Constant):
		return isinstance(node.value, str)
	if isinstance(node, ast.JoinedStr):
		return True
	if isinstance(node, ast.Call):
		if isinstance(node.func, ast.Name):
			return node.func.id in STRING_BUILDERS
		return isinstance(node.func, ast.Attribute) and node.func.attr in ("format", "join")
	if isinstance(node, ast.BinOp) and isinstance(node.op, (ast.Add, ast.Mod)):
		return _is_stringy(node.left) or _is_stringy(node.right)
	return False


def string_concat_in_loops(path: str, text: str) -> List[int]:
	"""Line numbers of ``s += <str>`` inside loop bodies."""
	tree = _parse(path, text)
	if tree is None:
		return []
	return sorted({
		node.lineno
		for node in _inside_loops(tree)
		if isinstance(node, ast.AugAssign)
		and isinstance(node.op, ast.Add)
		and isinstance(node.target, ast.Name)
		and _is_stringy(node.value)
	})


def queries_in_loops(path: str, text: str) -> List[int]:
	"""Line numbers of query-like method calls (``cursor.execute``, ``.filter``) inside loops."""
	tree = _parse(path, text)
	if tree is None:
		return []
	return sorted({
		node.lineno
		for node in _inside_loops(tree)
		if isinstance(node, ast.Call)
		and isinstance(node.func, ast.Attribute)
		and node.func.attr in QUERY_METHODS
	})


@dataclass(frozen=True)
class ClassShape:
	name: str
	line: int
	length: int
	methods: int


def class_shapes(path: str, text: str) -> List[ClassShape]:
	tree = _parse(path, text)
	if tree is None:
		return []
	shapes: List[ClassShape] = []
	for node in ast.walk(tree):
		if not isinstance(node, ast.ClassDef):
			continue
		d = _definition(node, node.name, "class")
		methods = sum(isinstance(sub, (ast.FunctionDef, ast.AsyncFunctionDef)) for sub in node.body)
		shapes.append(ClassShape(name=node.name, line=d.line, length=d.length, methods=methods))
	return sorted(shapes, key=lambda s: s.line)


def unreachable_statements(path: str, text: str) -> List[Tuple[int, str]]:
	"""(line, keyword) for the first statement after return/raise/continue/break in a block."""
	tree = _parse(path, text)
	if tree is None:
		return []
	terminators = {ast.Return: "return", ast.Raise: "raise", ast.Continue: "continue", ast.Break: "break"}
	found: List[Tuple[int, str]] = []
	for node in ast.walk(tree):
		for field in ("body", "orelse", "finalbody"):
			block = getattr(node, field, None)
			if not isinstance(block, list):
				continue
			for stmt, following in zip(block, block[1:]):
				keyword = terminators.get(type(stmt))
				if keyword:
					found.append((following.lineno, keyword))
					break
	return sorted(found)


def complexity(node: ast.AST) -> int:
	"""Branch count: if/loops/ternaries/try/except/boolean operators/comprehensions."""
	return sum(isinstance(sub, BRANCH_NODES) for sub in ast.walk(node))


def complex_functions(path: str, text: str, threshold: int = 10) -> List[Tuple[Definition, int]]:
	"""Functions and methods whose branch count exceeds ``threshold``."""
	tree = _parse(path, text)
	if tree is None:
		return []
	found: List[Tuple[Definition, int]] = []
	for node in ast.walk(tree):
		if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
			continue
		score = complexity(node)
		if score > threshold:
			found.append((_definition(node, node.name, "function"), score))
	return sorted(found, key=lambda item: item[0].line)
