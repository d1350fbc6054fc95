def test_fields_methods_and_init(output):
    source = """
    class Point {
        init(x, y) { this.x = x; this.y = y; }
        sum() { return this.x + this.y; }
    }
    let p = Point(1, 2);
    print p.sum();
    print p;
    print Point;
    p.x = 10;
    print p.sum();
    """
    assert output(source) == ["3", "Point instance", "Point", "12"]


def test_init_always_returns_the_instance(output):
    source = """
    class A { init() { this.v = 1; return; } }
    let a = A();
    print a.init();
    print a.init() == a;
    """
    assert output(source) == ["A instance", "true"]


def test_class_arity_comes_from_init(run):
    _, result = run("class A { init(a) {} } A();")
    assert [d.message for d in result.diagnostics] == ["Expected 1 arguments but got 0."]


def test_fields_shadow_methods(output):
    assert output("class A { f() { return 1; } } let a = A(); print a.f(); a.f = 2; print a.f;") == [
        "1", "2",
    ]


def test_bound_methods_remember_this(output):
    source = """
    class A {
        init() { this.v = 5; }
        get() { return this.v; }
    }
    let g = A().get;
    print g();
    """
    assert output(source) == ["5"]


def test_this_inside_nested_function(output):
    source = """
    class A {
        init() { this.v = "x"; }
        make() {
            fun inner() { return this.v; }
            return inner;
        }
    }
    print A().make()();
    """
    assert output(source) == ["x"]


def test_inherited_init_and_methods(output):
    source = """
    class A {
        init(x) { this.x = x; }
        twice() { return this.x * 2; }
    }
    class B < A {}
    print B(3).twice();
    """
    assert output(source) == ["6"]


def test_super_through_three_levels(output):
    source = """
    class A { name() { return "A"; } }
    class B < A { name() { return "B" + super.name(); } }
    class C < B { name() { return "C" + super.name(); } }
    print C().name();
    """
    assert output(source) == ["CBA"]


def test_super_is_bound_to_the_defining_class(output):
    source = """
    class A { say() { print "A"; } }
    class B < A { say() { super.say(); print "B"; } }
    class C < B {}
    C().say();
    """
    assert output(source) == ["A", "B"]


def test_undefined_super_method(run):
    _, result = run("class A {} class B < A { f() { return super.missing; } } B().f();")
    assert [d.message for d in result.diagnostics] == ["Undefined property 'missing'."]
