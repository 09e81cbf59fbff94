"""Help screen: game rules and the table of win probabilities."""

from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .dice import win_matrix

RULES = """\
1. The computer and the user each pick a different die.
2. Each roll is decided by adding the computer's and the user's numbers modulo 6.
3. The computer commits to its number with an HMAC before the user answers,
   then discloses the key so the HMAC can be checked.
4. The higher result wins; equal results are a tie."""


def probability_table(dice):
    """
    Build a table of the chance that the die in each row beats the die in
    each column. Diagonal cells compare a die with itself and are marked
    with `-`.
    """
    table = Table(box=box.SIMPLE_HEAVY, title="Probability of winning for the user")
    table.add_column("User dice v")
    for d in dice:
        table.add_column(escape(str(d)), justify="right")

    for i, (d, row) in enumerate(zip(dice, win_matrix(dice))):
        cells = []
        for j, p in enumerate(row):
            cell = f"{float(p):.4f}"
            cells.append(f"- ({cell})" if i == j else cell)
        table.add_row(escape(str(d)), *cells)
    return table


def show_help(console, dice):
    console.print(Panel(RULES, title="Game rules", expand=False))
    console.print(probability_table(dice))
