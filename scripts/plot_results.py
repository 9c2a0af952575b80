import json
import sys
import numpy as np
import matplotlib.pyplot as plt


def load_log(path):
    with open(path, "r") as f:
        return json.load(f)


def main(log_path="logs/show.json"):
    data = load_log(log_path)
    ts = [entry["t"] for entry in data]
    spread = []
    retiring = []
    for entry in data:
        active = [a for a in entry["agents"] if a["active"]]
        retiring.append(len(entry["agents"]) - len(active))
        if not active:
            spread.append(0.0)
            continue
        positions = np.array([[a["position"][k] for k in "xyz"] for a in active])
        spread.append(float(np.linalg.norm(positions - positions.mean(axis=0), axis=1).mean()))

    fig, (ax1, ax2) = plt.subplots(2, 1, sharex=True)
    ax1.plot(ts, spread)
    ax1.set_ylabel("mean distance to centroid")
    ax1.set_title("Formation spread over time")
    ax2.plot(ts, retiring, color="red")
    ax2.set_ylabel("retiring drones")
    ax2.set_xlabel("time")
    plt.show()


if __name__ == "__main__":
    log = sys.argv[1] if len(sys.argv) > 1 else "logs/show.json"
    main(log)
