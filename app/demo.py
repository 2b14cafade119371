"""
No-Guess Minesweeper - Interactive Demo

Run with: streamlit run app/demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st
from typing import Any, Dict, List, Optional, Tuple

from noguess import LEVELS, CellState, GamePhase, NoGuessVerifier, RevealEngine


COLORS = {
    "0": "#cccccc",
    "1": "#0000ff",
    "2": "#008000",
    "3": "#ff0000",
    "4": "#000080",
    "5": "#800000",
    "6": "#008080",
    "7": "#000000",
    "8": "#808080",
}


def render_board_html(
    engine: RevealEngine,
    highlight_cell: Optional[Tuple[int, int]] = None,
    show_mines: bool = False,
) -> str:
    """Render the engine's visible board as HTML with styling."""
    # Scale cell size based on board width
    if engine.cols >= 20:
        cell_size = 18
        font_size = "12px"
    elif engine.cols >= 14:
        cell_size = 22
        font_size = "13px"
    else:
        cell_size = 26
        font_size = "15px"

    html = '<div style="font-family: monospace; line-height: 1.2;">'
    html += '<table style="border-collapse: collapse; margin: auto;">'

    # Column header
    html += "<tr><td></td>"
    for c in range(engine.cols):
        html += f'<td style="text-align: center; color: #888; font-size: 10px;">{c}</td>'
    html += "</tr>"

    for r in range(engine.rows):
        html += f'<tr><td style="color: #888; font-size: 10px; padding-right: 4px;">{r}</td>'
        for c in range(engine.cols):
            state = engine.cell_state(r, c)
            mine = engine.is_mine(r, c)

            if state == CellState.FLAGGED:
                cell = "F"
                bg = "#ffa500"
                text_color = "#ffffff"
            elif state == CellState.REVEALED and mine:
                cell = "M"  # Hit mine
                bg = "#ff0000"
                text_color = "#ffffff"
            elif state == CellState.REVEALED:
                cell = str(engine.cell_value(r, c))
                bg = "#f0f0f0" if cell == "0" else "#ffffff"
                text_color = COLORS.get(cell, "#000000")
            elif show_mines and mine:
                cell = "M"
                bg = "#ffcccc"
                text_color = "#ff0000"
            else:
                cell = "."
                bg = "#c0c0c0"
                text_color = "#666666"

            border = "2px solid #ff0000" if (r, c) == highlight_cell else "1px solid #999"
            display = cell if cell != "0" else " "

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


def deduction_replay(engine: RevealEngine, first_click: Tuple[int, int]) -> Dict[str, int]:
    """Re-run the verifier on the installed layout and count moves by method."""
    verifier = NoGuessVerifier(engine.layout(), engine.config, record_steps=True)
    verifier.verify(*first_click)
    counts: Dict[str, int] = {}
    for _, _, _, method in verifier.moves_sequence:
        counts[method] = counts.get(method, 0) + 1
    return counts


def new_engine(rows: int, cols: int, mines: int) -> None:
    st.session_state.engine = RevealEngine(rows, cols, mines)
    st.session_state.first_click = None
    st.session_state.last_move = None
    st.session_state.message = None


def main():
    st.set_page_config(
        page_title="No-Guess Minesweeper",
        page_icon="💣",
        layout="wide",
    )

    st.title("No-Guess Minesweeper")
    st.markdown("""
    Every board is generated after your first click and certified solvable by pure deduction.
    """)

    # Sidebar configuration
    st.sidebar.header("Board Configuration")

    level_labels = [f"{lv.id}. {lv.name} ({lv.rows}x{lv.cols}, {lv.mines})" for lv in LEVELS]
    preset = st.sidebar.selectbox("Level", level_labels + ["Custom"])

    if preset == "Custom":
        cols = st.sidebar.slider("Columns", 5, 30, 16)
        rows = st.sidebar.slider("Rows", 5, 24, 16)
        max_mines = rows * cols - 9
        mines = st.sidebar.slider("Mines", 1, max_mines, min(40, max_mines))
    else:
        level = LEVELS[level_labels.index(preset)]
        rows, cols, mines = level.rows, level.cols, level.mines

    # Initialize session state
    if "engine" not in st.session_state:
        st.session_state.prev_settings = None

    current_settings = (rows, cols, mines)
    if st.session_state.prev_settings != current_settings:
        new_engine(rows, cols, mines)
        st.session_state.prev_settings = current_settings

    engine: RevealEngine = st.session_state.engine

    col1, col2 = st.columns([3, 1])

    with col1:
        st.subheader("Game Board")

        move_col1, move_col2, move_col3, move_col4 = st.columns([2, 1, 1, 1])
        with move_col1:
            action = st.radio("Action", ["Reveal", "Flag", "Chord"], horizontal=True)
        with move_col2:
            row = st.number_input("Row", 0, rows - 1, rows // 2)
        with move_col3:
            col = st.number_input("Col", 0, cols - 1, cols // 2)
        with move_col4:
            apply_move = st.button("Apply", type="primary")

        if apply_move and engine.phase in (GamePhase.UNPLAYED, GamePhase.PLAYING):
            row, col = int(row), int(col)
            if engine.phase == GamePhase.UNPLAYED and action == "Reveal":
                st.session_state.first_click = (row, col)

            hit = False
            if action == "Reveal":
                hit = engine.reveal(row, col).hit
            elif action == "Flag":
                engine.toggle_flag(row, col)
            else:
                hit = engine.chord_reveal(row, col).hit

            if hit:
                engine.end_game()
            st.session_state.last_move = (row, col)
            st.rerun()

        if st.button("New Board"):
            new_engine(rows, cols, mines)
            st.rerun()

        finished = engine.phase in (GamePhase.WON, GamePhase.LOST)
        html = render_board_html(
            engine, highlight_cell=st.session_state.last_move, show_mines=finished
        )
        st.markdown(html, unsafe_allow_html=True)

        if engine.phase == GamePhase.WON:
            st.success(f"Cleared in {engine.elapsed_seconds()}s without a single guess.")
        elif engine.phase == GamePhase.LOST:
            st.error("Game Over! Hit a mine.")
        elif engine.phase == GamePhase.UNPLAYED:
            st.info("Reveal any cell to generate the board.")

    with col2:
        st.subheader("Board Statistics")

        metrics: List[Tuple[str, Any]] = [
            ("Phase", engine.phase.value),
            ("Mines", engine.mine_count),
            ("Flags", engine.flagged_count),
            ("Completion", f"{engine.completion_percent()}%"),
        ]
        for label, value in metrics:
            st.metric(label, value)

        generation = engine.last_generation
        if generation is not None:
            st.markdown("---")
            st.markdown("**Generation**")
            st.text(f"Attempts: {generation.attempts}")
            st.text(f"Time: {generation.elapsed_seconds:.3f}s")

            stats = generation.verifier_stats
            for name in ("local", "subset", "exact", "global"):
                st.text(f"{name.capitalize()}: {stats.get(f'inferred_{name}_count', 0)} cells")

            if st.session_state.first_click is not None and st.checkbox("Replay deduction path"):
                counts = deduction_replay(engine, st.session_state.first_click)
                for method, count in sorted(counts.items()):
                    st.text(f"{method}: {count} moves")

        st.markdown("---")
        st.subheader("Verifier Passes")
        st.markdown("""
        1. **Local**: a number already satisfied, or saturated by its hidden cells
        2. **Subset**: one number's hidden cells contained in another's
        3. **Exact**: backtracking over small connected clusters
        4. **Global**: the remaining mine total
        """)


if __name__ == "__main__":
    main()
