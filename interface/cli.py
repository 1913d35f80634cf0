from boxbot.config import CONFIG
from boxbot.core.board import GameBoard, IllegalMove, Move
from boxbot.core.search import SearchEngine


def main(rows=3, cols=3, depth=None):
    # human plays first, engine plays player 2
    board = GameBoard(rows, cols)
    engine = SearchEngine(depth=depth or CONFIG.search.depth)

    while not board.is_game_over():
        board.print_board()
        print(f"Score {board.scores()[0]} - {board.scores()[1]}")
        print("----------------------------")

        if board.to_move == 1:
            user_move = input("Enter your move (H row col / V row col): ")
            try:
                move = Move.parse(user_move)
            except IllegalMove as e:
                print(e)
                continue
            if not board.make_move(move):
                print("Illegal move, try again.")
                continue
        else:
            move, score = engine.search_best_move(board.state, board.to_move)
            print(f"Engine plays: {move} | Eval: {score}")
            board.make_move(move)

    board.print_board()
    print("Game Over")
    winner = board.winner()
    print(f"Result: {board.scores()[0]} - {board.scores()[1]}"
          + (" (draw)" if winner == 0 else f" (player {winner} wins)"))


if __name__ == "__main__":
    main()
