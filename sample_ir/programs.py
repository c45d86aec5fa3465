"""Small hand-built IR modules for trying out the CLI.

Run from the repository root:
    python -m irlens.main --vocab-path data/seed_vocab.json embed sample_ir.programs:build
"""

from irlens.ir import Function, Module, Type, constant

i1 = Type.integer(1)
i32 = Type.integer(32)


def build_sum_to() -> Function:
    """
    int sum_to(int n) { int s = 0; for (int i = 0; i < n; i++) s += i; return s; }
    """
    func = Function.define("sum_to", i32, [("n", i32)])
    (n,) = func.arguments
    entry = func.add_block("entry")
    loop = func.add_block("loop")
    exit_ = func.add_block("exit")

    entry.append("br", operands=[loop])

    i = loop.append("phi", i32, [constant("0", i32), entry], name="i")
    s = loop.append("phi", i32, [constant("0", i32), entry], name="s")
    s_next = loop.append("add", i32, [s, i], name="s.next")
    i_next = loop.append("add", i32, [i, constant("1", i32)], name="i.next")
    i.operands += [i_next, loop]
    s.operands += [s_next, loop]
    cond = loop.append("icmp", i1, [i_next, n], name="cond")
    loop.append("br", operands=[cond, loop, exit_])

    exit_.append("ret", operands=[s_next])
    return func


def build_max() -> Function:
    func = Function.define("max", i32, [("a", i32), ("b", i32)])
    a, b = func.arguments
    entry = func.add_block("entry")
    take_a = func.add_block("take_a")
    take_b = func.add_block("take_b")
    dead = func.add_block("dead")

    cond = entry.append("icmp", i1, [a, b], name="cond")
    entry.append("br", operands=[cond, take_a, take_b])
    take_a.append("ret", operands=[a])
    take_b.append("ret", operands=[b])
    # Nothing branches here
    dead.append("ret", operands=[constant("0", i32)])
    return func


def build() -> Module:
    module = Module(name="programs")
    module.add_function(build_sum_to())
    module.add_function(build_max())
    module.add_function(Function.define("abs", i32, [("x", i32)]))  # declaration
    return module
