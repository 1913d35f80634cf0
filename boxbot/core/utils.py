def format_info(depth, score, nodes, elapsed, best_move):
        move_str = str(best_move) if best_move is not None else "-"
        nps = int(nodes / elapsed) if elapsed > 0 else 0
        return (f"info depth {depth} score {score} nodes {nodes} nps {nps} "
                f"time {int(elapsed * 1000)} move {move_str}")
