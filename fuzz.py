#!/usr/bin/env python3
"""
Random fuzzer for the Razor formatter.
Generates malformed Razor/HTML to test that formatting is total and stable.

Checks, per generated document:
    - format() does not raise
    - format() finishes in under 5 seconds
    - joining the tokens' raw content gives the input back
    - formatting the output again changes nothing (with --idempotence)
"""

import argparse
import logging
import random
import string
import sys
import time
import traceback

# Fuzzing strategies
TAGS = [
    "div", "span", "p", "a", "img", "table", "tr", "td", "th", "ul", "ol", "li",
    "form", "input", "button", "select", "option", "textarea", "script", "style",
    "head", "body", "html", "title", "meta", "link", "br", "hr", "h1", "h2", "h3",
    "pre", "code", "section", "header", "footer", "nav", "main", "label",
    "EditForm", "InputText", "Component", "MudButton", "router-view",
]

VOID_TAGS = ["area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"]

ATTRIBUTES = [
    "id", "class", "style", "href", "src", "alt", "title", "name", "value", "type",
    "onclick", "data-x", "aria-label", "role", "disabled", "checked", "hidden",
    "@onclick", "@bind", "@bind-Value", "@ref", "@key", "asp-for", "asp-action",
]

EXPRESSIONS = [
    "@Model.Name", "@item.Title", "@(x + 1)", "@(Model.Items[0].Name)",
    '@(flag ? "a" : "b")', "@Items[i]", "@GetLabel(\"x\")", "@DateTime.Now.ToString(\"t\")",
    "@Html.Raw(x)", "@(a > b)", "@user@example.com", "@@escaped",
]

CONDITIONS = ["(x)", "(a > b)", '(s == "}")', "(items.Count > 0)", "(var i = 0; i < 3; i++)", "(var item in Model)"]

LINE_DIRECTIVES = [
    '@page "/counter"', "@using System.Text", "@inject IFoo Foo", "@model IndexModel",
    "@layout MainLayout", "@namespace App.Pages", "@typeparam TItem", "@rendermode InteractiveServer",
]

SPECIAL_CHARS = ["\x00", "\t", "\r", "\r\n", " ", "​", "﻿", "{", "}", "(", ")", '"', "'", "@", "<", ">"]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    ws = [" ", "\t", "\n", "\r\n", "    ", ""]
    return "".join(random.choices(ws, k=random.randint(0, 4)))


def fuzz_attribute():
    """Generate (possibly malformed) attributes."""
    name = random.choice(ATTRIBUTES)
    strategies = [
        lambda: name,
        lambda: f'{name}="{random_string()}"',
        lambda: f"{name}='{random_string()}'",
        lambda: f"{name}={random_string(1, 8)}",
        lambda: f'{name}="{random.choice(EXPRESSIONS)}"',
        lambda: f'{name} = "{random_string()}"',
        lambda: f'{name}="{random_string()}',  # Unterminated
        lambda: f"{name}=",
        lambda: random.choice(SPECIAL_CHARS) + random_string(1, 4),
    ]
    return random.choice(strategies)()


def fuzz_open_tag():
    tag = random.choice(TAGS)
    attrs = " ".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    ending = random.choice([">", " />", "/>", "", " >"])
    return f"<{tag} {attrs}{ending}" if attrs else f"<{tag}{ending}"


def fuzz_close_tag():
    strategies = [
        lambda: f"</{random.choice(TAGS)}>",
        lambda: f"</{random.choice(TAGS)}",
        lambda: "</>",
        lambda: f"</ {random.choice(TAGS)} >",
    ]
    return random.choice(strategies)()


def fuzz_element():
    tag = random.choice(TAGS)
    inner = random.choice([random_string(0, 10), fuzz_text(), fuzz_open_tag(), ""])
    return f"{fuzz_open_tag()}{inner}</{tag}>"


def fuzz_text():
    parts = [random_string(1, 15), random.choice(EXPRESSIONS), random_whitespace(), random.choice(SPECIAL_CHARS)]
    return "".join(random.choices(parts, k=random.randint(1, 4)))


def fuzz_comment():
    strategies = [
        lambda: f"<!-- {random_string()} -->",
        lambda: f"<!--{random_string()}",  # Unterminated
        lambda: f"@* {random_string()} *@",
        lambda: f"@* {random_string()}",  # Unterminated
    ]
    return random.choice(strategies)()


def fuzz_doctype():
    return random.choice(["<!DOCTYPE html>", "<!doctype html>", "<!DOCTYPE", "<!DOCTYPE html"])


def fuzz_line_directive():
    return random.choice(LINE_DIRECTIVES) + "\n"


def fuzz_body(depth=0):
    if depth > 3 or random.random() < 0.4:
        return random.choice([fuzz_text(), fuzz_element(), ""])
    return fuzz_control_flow(depth + 1)


def fuzz_control_flow(depth=0):
    """Generate control-flow blocks, some with broken braces or chains."""
    body = fuzz_body(depth)
    cond = random.choice(CONDITIONS)
    strategies = [
        lambda: f"@if {cond} {{ {body} }}",
        lambda: f"@if {cond} {{ {body} }} else {{ {fuzz_body(depth)} }}",
        lambda: f"@if {cond} {{ {body} }} else if {cond} {{ {body} }} else {{ {body} }}",
        lambda: f"@foreach {cond} {{{random_whitespace()}{body}{random_whitespace()}}}",
        lambda: f"@for {cond}\n{{\n{body}\n}}",
        lambda: f"@while {cond} {{ {body} }}",
        lambda: f"@do {{ {body} }} while {cond};",
        lambda: f"@try {{ {body} }} catch (Exception ex) {{ {body} }} finally {{ {body} }}",
        lambda: f"@try {{ {body} }} catch {{ {body} }}",
        lambda: f"@switch (x) {{ case 1: {body} break; case {{ A: true }}: {body} default: {body} }}",
        lambda: f"@using (var s = Open()) {{ {body} }}",
        lambda: f"@lock (sync) {{ {body} }}",
        lambda: f"@section Scripts {{ {body} }}",
        lambda: f"@{{ var x = {random.randint(0, 9)}; }}",
        lambda: f"@code {{ private int count = {random.randint(0, 9)}; }}",
        lambda: f"@if {cond} {{ {body}",  # Unterminated body
        lambda: f"@if (x {{ {body} }}",  # Unterminated condition
        lambda: f"@if {cond} {{ {body} }} else",  # Dangling chain
    ]
    return random.choice(strategies)()


def fuzz_preserved():
    tag = random.choice(["script", "style", "pre", "textarea"])
    return f"<{tag}>\n  {random_string()} {{ {random_string()} }}\n</{tag}>"


def generate_fuzzed_razor():
    """Generate a complete fuzzed Razor document."""
    parts = []

    if random.random() < 0.3:
        parts.append(fuzz_line_directive())
    if random.random() < 0.3:
        parts.append(fuzz_doctype())

    num_elements = random.randint(1, 20)
    for _ in range(num_elements):
        element_type = random.choices(
            [
                fuzz_open_tag,
                fuzz_close_tag,
                fuzz_element,
                fuzz_text,
                fuzz_comment,
                fuzz_control_flow,
                fuzz_line_directive,
                fuzz_preserved,
            ],
            weights=[15, 10, 15, 15, 5, 20, 5, 5],
        )[0]
        parts.append(element_type())
        parts.append(random_whitespace())

    return "".join(parts)


HANG_SECONDS = 5.0

_KINDS = (("crash", "Crashes"), ("hang", "Hangs"), ("mismatch", "Mismatches"))


class Failure:
    __slots__ = ("detail", "kind", "number", "text")

    def __init__(self, kind, number, text, detail):
        self.kind = kind
        self.number = number
        self.text = text
        self.detail = detail

    def summary(self):
        last = self.detail.splitlines()[-1] if self.detail else ""
        return f"#{self.number} [{self.kind}] {last}"


def check_document(text, check_idempotence):
    """Return a problem description for ``text``, or None when it formats cleanly."""
    from razorfmt import format, tokenize

    joined = "".join(token.raw_content for token in tokenize(text))
    if joined != text:
        return "token round-trip lost text"

    once = format(text)
    if check_idempotence and format(once) != once:
        return "second pass changed the output"
    return None


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False, check_idempotence=False):
    """Format ``num_tests`` generated documents and report what went wrong."""
    if seed is not None:
        random.seed(seed)

    failures = []
    print(f"Fuzzing razorfmt: {num_tests} documents (seed={seed})")
    started = time.perf_counter()

    for number in range(num_tests):
        text = generate_fuzzed_razor()
        if verbose and number and number % 250 == 0:
            print(f"  {number} documents, {len(failures)} failures")

        case_start = time.perf_counter()
        try:
            problem = check_document(text, check_idempotence)
        except Exception:
            failures.append(Failure("crash", number, text, traceback.format_exc()))
            continue
        took = time.perf_counter() - case_start

        if took > HANG_SECONDS:
            failures.append(Failure("hang", number, text, f"{took:.2f}s"))
        elif problem is not None:
            failures.append(Failure("mismatch", number, text, problem))

    total = time.perf_counter() - started
    counts = {label: sum(1 for f in failures if f.kind == kind) for kind, label in _KINDS}

    print()
    print(f"Documents:  {num_tests}")
    print(f"Clean:      {num_tests - len(failures)}")
    for label, count in counts.items():
        print(f"{label}:".ljust(12) + str(count))
    print(f"Elapsed:    {total:.2f}s ({num_tests / total:.0f} docs/s)")

    for failure in failures[:10]:
        print()
        print(failure.summary())
        print(f"  input: {failure.text[:160]!r}")
    if len(failures) > 10:
        print(f"\n({len(failures) - 10} more not shown)")

    if save_failures and failures:
        filename = f"fuzz_failures_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as out:
            out.write(f"seed: {seed}\n\n")
            for failure in failures:
                out.write(f"--- {failure.kind} #{failure.number} ---\n")
                out.write(f"{failure.text}\n")
                out.write(f"--- detail ---\n{failure.detail}\n\n")
        print(f"\nWrote {len(failures)} failures to {filename}")

    return not failures


def main():
    parser = argparse.ArgumentParser(description="Fuzz the Razor formatter with malformed input")
    parser.add_argument("-n", "--num-tests", type=int, default=1000, help="documents to generate (default: 1000)")
    parser.add_argument("-s", "--seed", type=int, default=None, help="random seed")
    parser.add_argument("--idempotence", action="store_true", help="also format every output a second time")
    parser.add_argument("-v", "--verbose", action="store_true", help="print progress and debug logging")
    parser.add_argument("--save-failures", action="store_true", help="write failing documents to a file")
    parser.add_argument("--sample", type=int, metavar="N", help="print N generated documents and exit")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.ERROR)

    if args.sample:
        if args.seed is not None:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"--- sample {i + 1} ---")
            print(generate_fuzzed_razor())
        return

    ok = run_fuzzer(
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
        check_idempotence=args.idempotence,
    )
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
