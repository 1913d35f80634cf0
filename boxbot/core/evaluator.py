from boxbot.config import CONFIG
from boxbot.core.board import BoardState


class Evaluator:
    """Flat heuristic score of a board from one player's point of view.

    The three-sided box count is global and not turn-aware: the same count
    is charged as a threat from the opponent and credited as an opportunity
    for `player`, whoever actually moves next. No chain or parity analysis.
    Because of that shared term and the mobility bonus,
    evaluate(s, p) + evaluate(s, opp) == 2 * (mobility - net_threat * dangerous).
    """

    def __init__(self, cfg=None):
        self.cfg = cfg or CONFIG.eval

    def evaluate(self, state: BoardState, player: int) -> int:
        opponent = 3 - player
        dangerous = state.dangerous_boxes()

        score = self.cfg.box_weight * (state.score_of(player) - state.score_of(opponent))
        score -= self.cfg.opponent_threat_weight * dangerous
        score += self.cfg.own_threat_weight * dangerous
        # mobility tie-breaker
        score += self.cfg.mobility_weight * (state.total_edges - state.edge_count)
        return score
