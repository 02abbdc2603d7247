from codefacts.scope import BUILTIN, FREE, LOCAL, MODULE, ScopeResolver


def test_module_declaration_is_recorded_as_global_write():
	resolver = ScopeResolver(frozenset())
	resolver.declare("counter", record=True)
	assert resolver.facts.globals_written == {"counter"}
	assert resolver.classify("counter") == MODULE


def test_unrecorded_declaration_is_not_a_write():
	resolver = ScopeResolver(frozenset())
	resolver.declare("helper")
	assert resolver.facts.globals_written == set()


def test_local_shadows_module_binding():
	resolver = ScopeResolver(frozenset())
	resolver.declare("counter", record=True)
	with resolver.nested("function"):
		resolver.declare("counter", record=True)
		assert resolver.read("counter") == LOCAL
	assert resolver.classify("counter") == MODULE
	assert resolver.facts.globals_read == set()


def test_free_and_builtin_references():
	resolver = ScopeResolver(frozenset({"console"}))
	with resolver.nested("function"):
		assert resolver.read("console") == BUILTIN
		assert resolver.read("missing") == FREE
		assert resolver.write("leaked") == FREE
	assert resolver.facts.globals_read == {"missing"}
	assert resolver.facts.globals_written == {"leaked"}


def test_hoisted_declaration_binds_in_function_scope():
	resolver = ScopeResolver(frozenset())
	with resolver.nested("function"):
		with resolver.nested("block"):
			scope = resolver.declare("x", hoist=True)
			assert scope.kind == "function"
		assert resolver.classify("x") == LOCAL
	assert resolver.classify("x") == FREE


def test_hoisting_at_top_level_reaches_module():
	resolver = ScopeResolver(frozenset())
	with resolver.nested("block"):
		resolver.declare("y", hoist=True, record=True)
	assert resolver.current.is_module
	assert resolver.facts.globals_written == {"y"}


def test_earlier_use_keeps_its_classification():
	resolver = ScopeResolver(frozenset())
	with resolver.nested("function"):
		resolver.read("late")
		resolver.declare("late")
		assert resolver.classify("late") == LOCAL
	assert resolver.facts.globals_read == {"late"}
