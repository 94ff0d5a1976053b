# scripts/plot_convergence.py
"""Plot a SenseRank walk trace from CSV (senserank rank ... --csv)."""

import sys
import pandas as pd
import matplotlib.pyplot as plt

def main():
    if len(sys.argv) < 2:
        print("Usage: python plot_convergence.py results/bank.csv")
        return
    
    df = pd.read_csv(sys.argv[1])
    
    fig, (ax_rank, ax_conv) = plt.subplots(2, 1, figsize=(10, 8), sharex=True)
    
    # Rank of each sense at the steps where it was updated
    for sense, group in df.groupby('sense'):
        ax_rank.plot(group['step'], group['rank'], label=sense, marker='o', markersize=2)
    
    ax_rank.set_ylabel('Rank')
    ax_rank.set_title('SenseRank Walk')
    ax_rank.legend(fontsize='small')
    ax_rank.grid(True, alpha=0.3)
    
    ax_conv.plot(df['step'], df['converge'], color='black', label='converge')
    ax_conv.plot(df['step'], df['delta'], color='gray', alpha=0.4, label='delta')
    ax_conv.set_xlabel('Step')
    ax_conv.set_ylabel('Convergence')
    ax_conv.set_yscale('log')
    ax_conv.legend()
    ax_conv.grid(True, alpha=0.3)
    
    out_path = sys.argv[1].replace('.csv', '.png')
    plt.savefig(out_path, dpi=150)
    print(f"Saved to {out_path}")
    plt.show()

if __name__ == "__main__":
    main()
