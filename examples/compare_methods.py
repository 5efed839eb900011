"""Compare the standard and modified updates on a function with a double root.

f(x) = (x - 1)^2 (x + 2) has a double root at x = 1, where the standard
update only converges linearly.

Run with: python examples/compare_methods.py
"""

import nrcalc as nr

EXPRESSION = "(x - 1)^2 * (x + 2)"

for method in nr.Method:
    config = nr.RunConfig(expression=EXPRESSION, x0=2.0, iterations=5, method=method, true_root=1.0)
    print(method.label)
    for record in nr.run(config):
        row = record.display(6)
        print(f"  {row.iteration}: x = {row.x_next:>10}  Ea = {row.ea:>12}  Et = {row.et:>12}")
