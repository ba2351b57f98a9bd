#!/usr/bin/env python3
"""
Random fuzzer for truncatehtml.
Generates random markup, truncates it at random limits and checks that the
output stays within budget and well formed.
"""

import argparse
import random
import string
import sys
import time
import traceback

from truncatehtml import Truncator, UnbalancedTagsError, truncate, visible_length

# Fuzzing strategies
TAGS = [
    "div", "span", "p", "a", "b", "i", "u", "em", "strong", "h1", "h2", "ul", "ol", "li",
    "table", "tr", "td", "blockquote", "pre", "code", "section", "article", "figure",
]
VOID_TAGS = ["area", "base", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "track", "wbr"]

ATTRIBUTES = ["id", "class", "style", "href", "src", "alt", "title", "data-x"]

ENTITIES = ["&amp;", "&lt;", "&gt;", "&quot;", "&nbsp;", "&copy;", "&#169;", "&#x1f600;", "&hellip;"]

# Bare "&" and unterminated entities are plain text
LOOKALIKES = ["&", "&amp", "&#", "& ;"]

SPECIAL_CHARS = [
    "\u00a0",  # Non-breaking space
    "\u2028", "\u2029",  # Line/paragraph separators
    "\u200b", "\u200d",  # Zero-width chars
    "\U0001f604", "\U0001f468\u200d\U0001f469",  # Emoji, ZWJ sequence
    "\u00e9", "\u4e2d\u6587",  # Accented and CJK text
]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def random_whitespace():
    ws = [" ", "\t", "\n", "\r", "\f", ""]
    return "".join(random.choices(ws, k=random.randint(0, 3)))


def fuzz_attributes():
    parts = []
    for _ in range(random.randint(0, 3)):
        name = random.choice(ATTRIBUTES)
        value = random_string(0, 8)
        quote = random.choice(['"', "'"])
        parts.append(f"{random_whitespace() or ' '}{name}={quote}{value}{quote}")
    return "".join(parts)


def fuzz_text():
    """Generate visible text mixed with entities and whitespace."""
    choices = [
        lambda: random_string(1, 10),
        random_whitespace,
        lambda: random.choice(ENTITIES),
        lambda: random.choice(SPECIAL_CHARS),
        lambda: random.choice(LOOKALIKES),
    ]
    return "".join(random.choices(choices, weights=[10, 5, 3, 3, 1])[0]() for _ in range(random.randint(1, 5)))


def fuzz_comment():
    variants = [
        lambda: f"<!--{random_string(0, 10)}-->",
        lambda: f"<!-- {random_string(0, 5)}\n{random_string(0, 5)} -->",
        lambda: "<!---->",
        lambda: f"<!-- wp:{random_string(1, 6)} -->",
    ]
    return random.choice(variants)()


def fuzz_void():
    tag = random.choice(VOID_TAGS)
    return f"<{tag}{fuzz_attributes()}{random.choice(['', '/', ' /'])}>"


def fuzz_element(depth=0, max_depth=6):
    """Generate a balanced element with random children."""
    tag = random.choice(TAGS)
    children = []
    for _ in range(random.randint(0, 4)):
        children.append(fuzz_node(depth + 1, max_depth))
    return f"<{tag}{fuzz_attributes()}>{''.join(children)}</{tag}>"


def fuzz_node(depth=0, max_depth=6):
    if depth >= max_depth:
        return fuzz_text()
    generator = random.choices(
        [fuzz_text, fuzz_comment, fuzz_void, fuzz_element],
        weights=[10, 2, 2, 6],
    )[0]
    if generator is fuzz_element:
        return fuzz_element(depth, max_depth)
    return generator()


def fuzz_unbalanced():
    """Balanced markup with one stray or misnested end tag spliced in."""
    html = fuzz_element()
    stray = f"</{random.choice(TAGS)}>"
    cut = random.randint(0, len(html))
    return html[:cut] + stray + html[cut:]


def generate_fuzzed_html():
    """Generate a complete fuzzed HTML fragment."""
    parts = [fuzz_node() for _ in range(random.randint(1, 8))]
    return "".join(parts)


def check_truncation(html, limit, suffix=""):
    """Return a list of property violations for one truncation."""
    problems = []
    result = truncate(html, limit, suffix)

    if visible_length(result) > limit + visible_length(suffix):
        problems.append(f"visible length of {result!r} exceeds {limit}")

    checker = Truncator(None)
    checker.scan(result)
    if checker.tag_stack:
        problems.append(f"output leaves {checker.tag_stack} open")

    if not suffix and limit >= visible_length(html) and result != html:
        problems.append("output differs from input although the limit was not reached")

    return problems


def run_fuzzer(num_tests, seed=None, verbose=False, save_failures=False):
    """Run the fuzzer against truncate()."""
    if seed is not None:
        random.seed(seed)

    crashes = []
    violations = []
    hangs = []
    successes = 0
    expected_errors = 0

    print(f"Fuzzing truncatehtml with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        malformed = random.random() < 0.1
        html = fuzz_unbalanced() if malformed else generate_fuzzed_html()
        limit = random.randint(0, visible_length(html) + 3) if not malformed else random.randint(0, 50)
        suffix = random.choice(["", "", "...", "&hellip;"])

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            start = time.perf_counter()
            problems = check_truncation(html, limit, suffix) if not malformed else []
            if malformed:
                truncate(html, limit, suffix)
            elapsed = time.perf_counter() - start

            if elapsed > 5.0:
                hangs.append({"test_num": i, "html": html, "time": elapsed})
                if verbose:
                    print(f"  HANG: Test {i} took {elapsed:.2f}s")
            elif problems:
                violations.append({"test_num": i, "html": html, "limit": limit, "problems": problems})
                if verbose:
                    print(f"  VIOLATION: Test {i}: {problems[0]}")
            else:
                successes += 1

        except UnbalancedTagsError:
            if malformed:
                expected_errors += 1
                successes += 1
            else:
                crashes.append(
                    {"test_num": i, "html": html, "error": "balanced input rejected", "traceback": traceback.format_exc()}
                )
        except Exception as e:
            crashes.append({
                "test_num": i,
                "html": html,
                "error": str(e),
                "traceback": traceback.format_exc(),
            })
            if verbose:
                print(f"  CRASH: Test {i}: {e}")

    elapsed_total = time.time() - start_time

    # Report results
    print(f"\n{'='*60}")
    print("FUZZING RESULTS: truncatehtml")
    print(f"{'='*60}")
    print(f"Total tests:      {num_tests}")
    print(f"Successes:        {successes}")
    print(f"Rejected (ok):    {expected_errors}")
    print(f"Violations:       {len(violations)}")
    print(f"Crashes:          {len(crashes)}")
    print(f"Hangs (>5s):      {len(hangs)}")
    print(f"Total time:       {elapsed_total:.2f}s")
    print(f"Tests/second:     {num_tests/max(elapsed_total, 1e-9):.1f}")

    for violation in violations[:10]:
        print(f"\nTest #{violation['test_num']} (limit {violation['limit']}):")
        print(f"  HTML: {violation['html'][:200]!r}...")
        for problem in violation["problems"]:
            print(f"  {problem}")

    for crash in crashes[:10]:
        print(f"\nTest #{crash['test_num']}:")
        print(f"  HTML: {crash['html'][:200]!r}...")
        print(f"  Error: {crash['error']}")

    failures = crashes + violations + hangs
    if save_failures and failures:
        filename = f"fuzz_failures_{int(time.time())}.txt"
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Seed: {seed}\n\n")
            for crash in crashes:
                f.write(f"=== CRASH #{crash['test_num']} ===\n")
                f.write(f"HTML:\n{crash['html']}\n")
                f.write(f"Traceback:\n{crash['traceback']}\n\n")
            for violation in violations:
                f.write(f"=== VIOLATION #{violation['test_num']} (limit {violation['limit']}) ===\n")
                f.write(f"HTML:\n{violation['html']}\n")
                f.write("\n".join(violation["problems"]) + "\n\n")
            for hang in hangs:
                f.write(f"=== HANG #{hang['test_num']} ({hang['time']:.2f}s) ===\n")
                f.write(f"HTML:\n{hang['html']}\n\n")
        print(f"\nFailures saved to {filename}")

    return not failures


def main():
    parser = argparse.ArgumentParser(description="Fuzz truncatehtml with random markup")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    parser.add_argument("--save-failures", action="store_true", help="Save failures to a file")
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed HTML documents (no truncation)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed is not None:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate_fuzzed_html())
            print()
        return

    success = run_fuzzer(
        args.num_tests,
        seed=args.seed,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
