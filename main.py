# main.py
import argparse

from runners.run_train import main as train


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="classifier")
    p.add_argument("mode", choices=["train", "plot"])
    p.add_argument("args", nargs=argparse.REMAINDER, help="options for the selected mode")
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    if args.mode == "train":
        return train(args.args)
    elif args.mode == "plot":
        from tools.plot_training import main as plot
        return plot(args.args)


if __name__ == "__main__":
    main()
