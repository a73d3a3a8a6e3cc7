"""
Tests for the declaration extractor — state variables, functions, events.
"""

import time

from solmigrate.core.extractor import (
    extract_events,
    extract_functions,
    extract_state_variables,
    iter_members,
    parse_event_parameters,
    parse_parameters,
)
from solmigrate.core.scanner import mask_source


def _body(text):
    return mask_source(text)


# ── members ────────────────────────────────────────────────────────────

def test_iter_members_skips_nested_blocks():
    body = _body("uint a; function f() public { uint b; } uint c;")
    members = [(m.text, m.terminator) for m in iter_members(body)]
    assert members == [
        ("uint a", ";"),
        ("function f() public", "{"),
        ("uint c", ";"),
    ]


def test_iter_members_struct_literal_inside_parens():
    body = _body("Point public origin = Point({x: 0, y: 0}); uint after;")
    texts = [m.text for m in iter_members(body)]
    assert texts == ["Point public origin = Point({x: 0, y: 0})", "uint after"]


# ── state variables ────────────────────────────────────────────────────

def test_state_variables_basic():
    variables = extract_state_variables(_body("uint256 public totalSupply;"))
    assert len(variables) == 1
    var = variables[0]
    assert var.name == "totalSupply"
    assert var.type_name == "uint256"
    assert var.visibility == "public"
    assert var.constant is False
    assert var.immutable is False


def test_state_variable_default_visibility_is_internal():
    (var,) = extract_state_variables(_body("address owner;"))
    assert var.visibility == "internal"
    assert var.type_name == "address"


def test_state_variable_mapping():
    (var,) = extract_state_variables(_body("mapping(address => uint256) private balances;"))
    assert var.name == "balances"
    assert var.type_name == "mapping(address => uint256)"
    assert var.visibility == "private"
    assert var.is_mapping


def test_state_variable_nested_mapping():
    (var,) = extract_state_variables(
        _body("mapping(address => mapping(address => uint256)) public allowance;")
    )
    assert var.name == "allowance"
    assert var.type_name == "mapping(address => mapping(address => uint256))"


def test_state_variable_constant_and_immutable():
    body = _body(
        "uint256 public constant MAX = 100;\n"
        "address public immutable factory;\n"
        "uint256 public regular;\n"
    )
    by_name = {v.name: v for v in extract_state_variables(body)}
    assert by_name["MAX"].constant is True
    assert by_name["factory"].immutable is True
    assert by_name["regular"].constant is False
    assert by_name["regular"].immutable is False


def test_state_variable_constant_substring_heuristic_can_overmatch():
    # A different declaration containing "constant rate" also marks `rate`
    body = _body("uint256 public rate;\nuint256 constant rateCap = 5;\n")
    by_name = {v.name: v for v in extract_state_variables(body)}
    assert by_name["rate"].constant is True


def test_state_variable_keyword_lookup_scales_with_body_size():
    body = _body("".join(f"uint256 constant C{i} = {i};\nuint256 v{i};\n" for i in range(5000)))
    start = time.perf_counter()
    variables = extract_state_variables(body)
    assert time.perf_counter() - start < 2.0
    assert len(variables) == 10000
    assert all(v.constant for v in variables[::2])
    assert not any(v.constant for v in variables[1::2])


def test_state_variable_arrays_and_payable():
    body = _body("address payable public wallet;\nuint256[] public ids;\nbytes32[4] roots;\n")
    by_name = {v.name: v for v in extract_state_variables(body)}
    assert by_name["wallet"].type_name == "address payable"
    assert by_name["ids"].type_name == "uint256[]"
    assert by_name["roots"].type_name == "bytes32[4]"


def test_locals_inside_functions_are_not_state():
    body = _body(
        "uint256 public stored;\n"
        "function f() public { uint256 local = 1; stored = local; }\n"
    )
    assert [v.name for v in extract_state_variables(body)] == ["stored"]


def test_non_variable_members_are_skipped():
    body = _body(
        "using SafeMath for uint256;\n"
        "error Unauthorized(address caller);\n"
        "event Ping(uint256 value);\n"
        "function g() external;\n"
        "struct S { uint a; }\n"
        "enum Color { Red }\n"
        "uint256 public kept;\n"
    )
    assert [v.name for v in extract_state_variables(body)] == ["kept"]


def test_override_public_variable():
    (var,) = extract_state_variables(_body("uint256 public override totalSupply;"))
    assert var.name == "totalSupply"
    assert var.visibility == "public"


# ── parameters ─────────────────────────────────────────────────────────

def test_parse_parameters_drops_data_location():
    params = parse_parameters("address to, string memory uri, bytes calldata data")
    assert [(p.name, p.type_name) for p in params] == [
        ("to", "address"),
        ("uri", "string"),
        ("data", "bytes"),
    ]


def test_parse_parameters_unnamed_and_empty():
    assert parse_parameters("") == ()
    (param,) = parse_parameters("uint256")
    assert param.name == ""
    assert param.type_name == "uint256"


def test_parse_parameters_mapping_type_is_not_split():
    (param,) = parse_parameters("mapping(address => uint256) storage ledger")
    assert param.name == "ledger"
    assert param.type_name == "mapping(address => uint256)"


def test_parse_event_parameters_indexed():
    params = parse_event_parameters("address indexed from, uint256 value, bytes32 indexed")
    assert [(p.name, p.type_name, p.indexed) for p in params] == [
        ("from", "address", True),
        ("value", "uint256", False),
        ("", "bytes32", True),
    ]


# ── functions ──────────────────────────────────────────────────────────

def test_function_signature():
    (func,) = extract_functions(
        _body("function withdraw(uint256 amount) external payable returns (bool ok, uint256) { }")
    )
    assert func.name == "withdraw"
    assert func.visibility == "external"
    assert func.state_mutability == "payable"
    assert [(p.name, p.type_name) for p in func.parameters] == [("amount", "uint256")]
    assert [(p.name, p.type_name) for p in func.return_parameters] == [
        ("ok", "bool"),
        ("", "uint256"),
    ]
    assert func.is_constructor is False
    assert func.is_entrypoint is True


def test_function_defaults():
    (func,) = extract_functions(_body("function ping() { }"))
    assert func.visibility == "public"
    assert func.state_mutability == "nonpayable"
    assert func.parameters == ()
    assert func.return_parameters == ()


def test_internal_function_is_not_entrypoint():
    (func,) = extract_functions(_body("function _helper() internal view returns (uint256) { }"))
    assert func.visibility == "internal"
    assert func.state_mutability == "view"
    assert func.is_entrypoint is False


def test_constructor_is_moved_to_front():
    body = _body(
        "function foo() public { }\n"
        "constructor(address a) { }\n"
        "function bar() public { }\n"
    )
    functions = extract_functions(body)
    assert [f.name for f in functions] == ["constructor", "foo", "bar"]
    ctor = functions[0]
    assert ctor.is_constructor is True
    assert ctor.visibility == "public"
    assert [(p.name, p.type_name) for p in ctor.parameters] == [("a", "address")]
    assert ctor.is_entrypoint is False


def test_constructor_with_base_call_and_payable():
    (ctor,) = extract_functions(_body("constructor(uint x) payable Ownable(msg.sender) { }"))
    assert ctor.is_constructor
    assert ctor.state_mutability == "payable"


def test_modifiers_are_flagged():
    body = _body(
        "modifier onlyOwner() { require(msg.sender == owner); _; }\n"
        "modifier whenLive { _; }\n"
    )
    functions = extract_functions(body)
    assert [f.name for f in functions] == ["onlyOwner", "whenLive"]
    assert all(f.is_modifier for f in functions)
    assert all(f.visibility == "internal" for f in functions)
    assert not any(f.is_entrypoint for f in functions)


def test_fallback_and_receive():
    body = _body(
        "receive() external payable { }\n"
        "fallback() external { }\n"
        "function() external payable { }\n"
    )
    functions = extract_functions(body)
    assert [f.name for f in functions] == ["receive", "fallback", "fallback"]
    assert functions[0].state_mutability == "payable"
    assert functions[2].state_mutability == "payable"


def test_interface_functions_without_bodies():
    body = _body(
        "function balanceOf(address who) external view returns (uint256);\n"
        "function transfer(address to, uint256 value) external returns (bool);\n"
    )
    assert [f.name for f in extract_functions(body)] == ["balanceOf", "transfer"]


def test_function_name_in_comment_is_ignored():
    body = _body("// function ghost() public { }\nfunction real() public { }\n")
    assert [f.name for f in extract_functions(body)] == ["real"]


# ── events ─────────────────────────────────────────────────────────────

def test_events():
    body = _body(
        "event Transfer(address indexed from, address indexed to, uint256 value);\n"
        "event Paused();\n"
    )
    events = extract_events(body)
    assert [e.name for e in events] == ["Transfer", "Paused"]
    assert [p.indexed for p in events[0].parameters] == [True, True, False]
    assert events[1].parameters == ()


def test_function_type_state_variable():
    body = _body("function(uint) external returns (uint) public cb;\nuint y;\n")
    variables = extract_state_variables(body)
    assert [v.name for v in variables] == ["cb", "y"]
    assert variables[0].type_name == "function(uint) external returns (uint)"
    assert variables[0].visibility == "public"
    assert extract_functions(body) == []


def test_bodiless_legacy_fallback_is_still_a_function():
    body = _body("function() external payable;\n")
    assert extract_state_variables(body) == []
    (func,) = extract_functions(body)
    assert func.name == "fallback"
    assert func.state_mutability == "payable"
