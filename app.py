import copy
from typing import Dict, Optional

import streamlit as st

from expectimax2048 import DOWN, LEFT, RIGHT, UP, Agent, AgentConfig, BoardState
from expectimax2048.brain import DIRECTION_NAMES

AUTOPLAY_MODES = ["Off", "Play until no moves", "Play until target tile"]
# moves played per script run while autoplaying, so the board redraws as it goes
AUTOPLAY_BATCH = 5


def new_session():
    st.session_state.game = BoardState.new_game()
    st.session_state.agent = Agent(AgentConfig(depth=3))
    st.session_state.prev_grid = None
    st.session_state.last_move = None


def play(direction: int) -> bool:
    moved = game.move(direction)
    if moved:
        st.session_state.last_move = DIRECTION_NAMES[direction]
    return moved


def autoplay_done() -> bool:
    if not game.moves_available():
        return True
    if st.session_state.autoplay_mode == "Play until target tile":
        return game.won(st.session_state.target_tile)
    return False


# Streamlit UI

st.set_page_config(page_title="2048 AI — Expectimax", page_icon="🎮", layout="centered")
st.title("2048 — Expectimax")

# initialize session keys safely
if "game" not in st.session_state:
    new_session()
if "best_score" not in st.session_state:
    st.session_state.best_score = 0
if "autoplay_mode" not in st.session_state:
    st.session_state.autoplay_mode = "Off"
if "target_tile" not in st.session_state:
    st.session_state.target_tile = 2048

game: BoardState = st.session_state.game
agent: Agent = st.session_state.agent

# BUTTON HANDLERS
btn_c1, btn_c2, btn_c3, btn_c4 = st.columns([1, 1, 1, 1])
btn_left = btn_c1.button("⬅️ Left")
btn_up = btn_c2.button("⬆️ Up")
btn_down = btn_c3.button("⬇️ Down")
btn_right = btn_c4.button("➡️ Right")

ai_c1, ai_c2, ai_c3 = st.columns([1, 1, 2])
btn_ai = ai_c1.button("🤖 AI Move")
btn_restart = ai_c2.button("🔄 Restart")
agent.depth = ai_c3.slider("Expectimax Depth", 1, 4, agent.depth)

autoplay_mode = st.selectbox(
    "Autoplay Mode",
    AUTOPLAY_MODES,
    index=AUTOPLAY_MODES.index(st.session_state.autoplay_mode),
)
st.session_state.autoplay_mode = autoplay_mode
if autoplay_mode == "Play until target tile":
    st.session_state.target_tile = st.selectbox("Target Tile", [256, 512, 1024, 2048], index=3)

if btn_restart:
    new_session()
    st.rerun()

# manual moves
for pressed, direction in ((btn_left, LEFT), (btn_right, RIGHT), (btn_up, UP), (btn_down, DOWN)):
    if pressed:
        play(direction)

# AI move
if btn_ai and game.moves_available():
    play(agent.select_move(game))

keep_playing = False
if autoplay_mode != "Off" and not autoplay_done():
    for _ in range(AUTOPLAY_BATCH):
        if not play(agent.select_move(game)) or autoplay_done():
            break
    keep_playing = not autoplay_done()

# Rendering (after inputs)
st.markdown("""
<style>
.board { display:flex; flex-direction:column; align-items:center; margin-top:10px; }
.row { display:flex; gap:12px; margin-bottom:12px; }
.tile {
  width:86px; height:86px; border-radius:10px;
  display:flex; align-items:center; justify-content:center;
  font-weight:700; font-size:26px;
  transition: transform 0.12s ease, opacity 0.16s ease;
}
.tile.new { transform:scale(1.12); opacity:0; animation:appear 0.14s ease forwards; }
@keyframes appear { from {transform:scale(1.2); opacity:0} to {transform:scale(1); opacity:1} }
</style>
""", unsafe_allow_html=True)

COLORS = {
    0: "#efe6dd", 2: "#f7f2ec", 4: "#efe6d9", 8: "#f2b179", 16: "#f59563",
    32: "#f67c5f", 64: "#f65e3b", 128: "#eddc9a", 256: "#edcf74", 512: "#edc850",
    1024: "#edc53f", 2048: "#edc22e"
}


def board_html(snapshot: Dict, prev: Optional[Dict]) -> str:
    size = snapshot["size"]
    html = "<div class='board'>"
    for y in range(size):
        html += "<div class='row'>"
        for x in range(size):
            tile = snapshot["cells"][x][y]
            v = tile["value"] if tile else 0
            col = COLORS.get(v, "#3c3a32")
            text = "#f9f6f2" if v >= 8 else "#776e65"
            is_new = prev is not None and prev["cells"][x][y] is None and v != 0
            new = " new" if is_new else ""
            label = str(v) if v != 0 else ""
            html += f"<div class='tile{new}' style='background:{col};color:{text}'>{label}</div>"
        html += "</div>"
    html += "</div>"
    return html


snapshot = game.serialize()
st.markdown(board_html(snapshot, st.session_state.prev_grid), unsafe_allow_html=True)
st.subheader(f"Score: {game.score}")
st.session_state.prev_grid = copy.deepcopy(snapshot)

if not game.moves_available():
    st.error("Game over: no moves left.")

# footer
if game.score > st.session_state.best_score:
    st.session_state.best_score = game.score
last = st.session_state.last_move or "-"
st.write(f"Max Tile: {game.max_tile()} | Best Score: {st.session_state.best_score} | Last Move: {last}")
stats = agent.last_stats
st.markdown(
    f"<div style='font-size:13px;color:#666'>Depth {agent.depth} search: "
    f"{stats.nodes} nodes, {stats.evaluations} leaf evaluations.</div>",
    unsafe_allow_html=True,
)

if keep_playing:
    st.rerun()
