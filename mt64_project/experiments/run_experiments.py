# experiments/run_experiments.py
# Sweep the state-recovery attack over sample counts and output truncation widths,
# collecting success/time statistics into a CSV.
# Requires a running oracle whose OUTPUT_BITS matches the widths being swept.

import argparse
import csv
import os
import subprocess
import sys
import time

from ..attacker.recover import SUCCESS_MARKER

ATTACKER_MODULE = 'mt64_project.attacker.recover'


def run_single(samples, output_bits, oracle=None):
    # run the attacker in its own interpreter, capture stdout for success detection
    cmd = [sys.executable, '-m', ATTACKER_MODULE,
           '--samples', str(samples), '--output_bits', str(output_bits)]
    if oracle:
        cmd += ['--oracle', oracle]
    t0 = time.time()
    p = subprocess.run(cmd, capture_output=True, text=True, timeout=600)
    elapsed = time.time() - t0
    stdout = p.stdout + p.stderr
    success = SUCCESS_MARKER in stdout
    return success, elapsed, stdout


def parse_int_list(text):
    return [int(x) for x in text.split(',') if x.strip()]


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--samples_list', type=str, default='100,311,312,400,624', help='comma list')
    parser.add_argument('--output_bits_list', type=str, default='64,48,32', help='comma list')
    parser.add_argument('--trials', type=int, default=5, help='repeats per combo')
    parser.add_argument('--oracle', type=str, default=None, help='oracle base url')
    parser.add_argument('--results_dir', type=str, default='results')
    args = parser.parse_args()

    samples_list = parse_int_list(args.samples_list)
    output_bits_list = parse_int_list(args.output_bits_list)
    os.makedirs(args.results_dir, exist_ok=True)
    csv_path = os.path.join(args.results_dir, f'experiments_{int(time.time())}.csv')
    with open(csv_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['samples', 'output_bits', 'trial', 'success', 'time_s'])
        for samples in samples_list:
            for output_bits in output_bits_list:
                for trial in range(args.trials):
                    print(f"Running samples={samples}, output_bits={output_bits}, trial={trial}")
                    success, elapsed, _ = run_single(samples, output_bits, args.oracle)
                    writer.writerow([samples, output_bits, trial, int(success), f"{elapsed:.3f}"])
                    f.flush()
    print("Experiments complete. CSV saved at:", csv_path)
