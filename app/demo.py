"""
Minefield Solver - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st
from typing import Any, Dict, List, Optional, Set, Tuple

from minesolver import MinefieldSolver, NativeMinefield, new_minefield
from minesolver.config import DEFAULT_PRESET, PRESETS

NUMBER_COLORS = {
    "1": "#0000ff",
    "2": "#008000",
    "3": "#ff0000",
    "4": "#000080",
    "5": "#800000",
    "6": "#008080",
    "7": "#000000",
    "8": "#808080",
}

METHOD_LABELS = {
    "first_move": "First Move",
    "rule_a": "Rule A (all mines flagged, reveal rest)",
    "rule_b": "Rule B (unknowns are all mines)",
    "guess": "Relaxation Guess",
    "all_flagged": "All Mines Flagged",
}


def cell_style(symbol: str, hidden_mine: bool) -> Tuple[str, str, str]:
    """Map a snapshot symbol to (display, background, text color)."""
    if symbol == "F":
        return "F", "#ffa500", "#ffffff"
    if symbol == "X":
        return "M", "#ff0000", "#ffffff"  # Hit mine
    if symbol == ".":
        if hidden_mine:
            return "M", "#ffcccc", "#ff0000"
        return ".", "#c0c0c0", "#666666"
    if symbol == "0":
        return " ", "#f0f0f0", "#cccccc"
    return symbol, "#ffffff", NUMBER_COLORS.get(symbol, "#000000")


def render_snapshot(
    snapshot: List[List[str]],
    highlight_cell: Optional[Tuple[int, int]] = None,
    mines: Optional[Set[Tuple[int, int]]] = None,
) -> str:
    """Render a board snapshot (rows of cell symbols) as an HTML table."""
    height = len(snapshot)
    width = len(snapshot[0]) if snapshot else 0

    # Scale cell size based on board width
    if width >= 30:
        cell_size, font_size = 14, "10px"
    elif width >= 16:
        cell_size, font_size = 20, "13px"
    else:
        cell_size, font_size = 26, "15px"

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    for row in range(height):
        html += "<tr>"
        for col in range(width):
            hidden_mine = mines is not None and (col, row) in mines
            display, bg, text_color = cell_style(snapshot[row][col], hidden_mine)
            if highlight_cell and (col, row) == highlight_cell:
                border = "3px solid #ff0000"
            else:
                border = "1px solid #999"

            html += f'''<td style="
                width: {cell_size}px; height: {cell_size}px;
                text-align: center;
                background: {bg};
                border: {border};
                color: {text_color};
                font-weight: bold;
                font-size: {font_size};
            ">{display}</td>'''
        html += "</tr>"

    html += "</table></div>"
    return html


def solve_fresh(preset: str, native: bool, seed: Optional[int]) -> Dict[str, Any]:
    """Solve a new field and keep everything the page needs to redraw it."""
    field = new_minefield(preset, native=native, seed=seed)
    solver = MinefieldSolver(field, record_steps=True)
    solved, luck = solver.solve()
    stats = solver.stats()
    stats["final_snapshot"] = solver.board.snapshot()
    # Only the native backend can tell us where the mines were
    stats["mines"] = field.mines if isinstance(field, NativeMinefield) else None
    stats["solved"] = solved
    stats["luck"] = luck
    return stats


def main():
    st.set_page_config(
        page_title="Minefield Solver",
        page_icon="💣",
        layout="wide",
    )

    st.title("Minefield Solver")
    st.markdown("""
    Clears minefields with two local deduction rules, and estimates mine
    probabilities by iterative relaxation whenever deduction stalls.
    """)

    # Sidebar configuration
    st.sidebar.header("Field Configuration")

    presets = sorted(PRESETS, key=lambda name: PRESETS[name]["width"] * PRESETS[name]["height"])
    preset = st.sidebar.selectbox(
        "Preset",
        presets,
        index=presets.index(DEFAULT_PRESET),
        format_func=lambda name: (
            f"{name.capitalize()} ({PRESETS[name]['width']}x{PRESETS[name]['height']}, "
            f"{PRESETS[name]['mine_count']})"
        ),
    )

    backend = st.sidebar.selectbox(
        "Minefield Backend",
        ["native", "scripted"],
        help="native: fields generated in-process. "
             "scripted: fields from the bundled mine_field.py script.",
    )

    seed_text = st.sidebar.text_input("Seed (optional)", "")
    seed: Optional[int] = int(seed_text) if seed_text.strip().lstrip("-").isdigit() else None

    # Initialize session state
    if "result" not in st.session_state:
        st.session_state.result = None
        st.session_state.replay_mode = False
        st.session_state.current_step = 0

    width = PRESETS[preset]["width"]
    use_vertical_layout = width >= 30

    col2 = None
    if use_vertical_layout:
        board_container = st.container()
    else:
        col1, col2 = st.columns([3, 1] if width >= 16 else [2, 1])
        board_container = col1

    with board_container:
        st.subheader("Board")

        if st.button("Solve", type="primary"):
            st.session_state.result = solve_fresh(preset, backend == "native", seed)
            st.session_state.replay_mode = False
            st.session_state.current_step = len(st.session_state.result["steps_history"]) - 1
            st.rerun()

        result = st.session_state.result
        steps_history: List[Dict[str, Any]] = result["steps_history"] if result else []

        # Replay controls (show only after solving)
        if result is not None and steps_history:
            st.markdown("---")
            st.session_state.replay_mode = st.checkbox(
                "Step-by-Step Replay Mode",
                value=st.session_state.replay_mode,
                key="replay_toggle",
            )

            if st.session_state.replay_mode:
                total_steps = len(steps_history)

                nav_col1, nav_col2, nav_col3, nav_col4 = st.columns([1, 1, 1, 2])
                with nav_col1:
                    if st.button("⏮ First"):
                        st.session_state.current_step = 0
                        st.rerun()
                with nav_col2:
                    if st.button("◀ Prev") and st.session_state.current_step > 0:
                        st.session_state.current_step -= 1
                        st.rerun()
                with nav_col3:
                    if st.button("Next ▶") and st.session_state.current_step < total_steps - 1:
                        st.session_state.current_step += 1
                        st.rerun()
                with nav_col4:
                    if st.button("Last ⏭"):
                        st.session_state.current_step = total_steps - 1
                        st.rerun()

                step_display = st.slider(
                    "Step", 1, total_steps, st.session_state.current_step + 1, key="step_slider"
                )
                st.session_state.current_step = step_display - 1

                step = steps_history[st.session_state.current_step]
                action_label = "Reveal" if step["action"] == "reveal" else "Flag"
                col, row = step["cell"]
                st.info(
                    f"**Step {step_display}/{total_steps}**: {action_label} cell "
                    f"({col}, {row}), *{METHOD_LABELS[step['method']]}*"
                )

        if result is not None:
            if st.session_state.replay_mode and steps_history:
                step = steps_history[st.session_state.current_step]
                html = render_snapshot(step["knowledge_snapshot"], highlight_cell=step["cell"])
            else:
                html = render_snapshot(result["final_snapshot"], mines=result["mines"])
                if result["solved"]:
                    st.success("Solved! Every mine flagged.")
                else:
                    st.error("Lost! A probe hit a mine.")

            st.markdown(html, unsafe_allow_html=True)

            st.markdown("""
            <div style="font-size: 12px; margin-top: 10px;">
            <b>Legend:</b>
            <span style="background: #c0c0c0; color: #666666; padding: 2px 6px; margin: 0 4px; font-weight: bold;">.</span> Unknown
            <span style="background: #f0f0f0; padding: 2px 6px; margin: 0 4px;">&nbsp;</span> Empty (0)
            <span style="color: #0000ff; font-weight: bold; margin: 0 4px;">1-8</span> Adjacent mines
            <span style="background: #ffa500; color: white; padding: 2px 6px; margin: 0 4px; font-weight: bold;">F</span> Flagged
            <span style="background: #ffcccc; color: #ff0000; padding: 2px 6px; margin: 0 4px; font-weight: bold;">M</span> Unfound mine (native fields only)
            <span style="background: #ff0000; color: white; padding: 2px 6px; margin: 0 4px; font-weight: bold;">M</span> Hit mine
            </div>
            """, unsafe_allow_html=True)
        else:
            st.info("Click 'Solve' to generate and solve a new field.")

    if use_vertical_layout:
        stats_container = st.container()
    else:
        assert col2 is not None
        stats_container = col2

    with stats_container:
        st.subheader("Solver Statistics")

        result = st.session_state.result
        if result is not None:
            metrics: List[Tuple[str, Any]] = [
                ("Result", "Win" if result["solved"] else "Loss"),
                ("Luck", f"{result['luck']:.4f}"),
                ("Guesses", result["guesses_count"]),
                ("Reveal Moves", result["reveal_moves_count"]),
                ("Flags Placed", result["flags_placed"]),
            ]
            if use_vertical_layout:
                for column, (label, value) in zip(st.columns(len(metrics)), metrics):
                    with column:
                        st.metric(label, value)
            else:
                for label, value in metrics:
                    st.metric(label, value)

            st.markdown("---")
            st.text(f"Propagation rounds: {result['rounds_count']}")
            runs = result["relaxation_runs"]
            per_run = result["relaxation_iterations"] / runs if runs else 0.0
            st.text(f"Relaxation runs: {runs} ({per_run:.1f} iterations each)")
        else:
            st.info("Run the solver to see statistics.")

        if not use_vertical_layout:
            st.markdown("---")
            st.subheader("Algorithm Info")
            st.markdown("""
            **Strategy:**
            1. **Rule A**: count equals flags, so reveal the other neighbors
            2. **Rule B**: unknowns plus flags equal count, so flag them all
            3. **Relaxation**: estimate mine probabilities when both rules stall
            4. **Guess**: probe the lowest-probability cell; luck tracks survival odds
            """)


if __name__ == "__main__":
    main()
