"""
Results Export - writes the end-of-session record to CSV
"""

import csv
from datetime import datetime, timezone
from pathlib import Path

from utils.constants import RESULTS_DIR, RESULTS_HEADERS


class SaveManager:
    """
    Manages the per-subject results files
    """
    def __init__(self, save_dir=RESULTS_DIR):
        """
        Args:
            save_dir: Directory to store results files
        """
        self.save_dir = Path(save_dir)
        self.last_path = None

    def results_path(self, subject_id):
        """Path of the results file for a subject"""
        safe_id = "".join(c if c.isalnum() or c in "-_" else "_" for c in str(subject_id)) or "anonymous"
        return self.save_dir / f"maze_race_results_{safe_id}.csv"

    def build_record(self, summary):
        """
        Flatten a completion summary into one CSV row

        Args:
            summary: dict from PhaseStateMachine.summary()

        Returns:
            dict: Row keyed by RESULTS_HEADERS
        """
        latencies = list(summary.get('shopLatencies', []))
        latencies += [''] * (2 - len(latencies))

        return {
            'SubjectID': summary.get('subjectId', ''),
            'FinalPhase': summary.get('finalPhase', ''),
            'FinalCoins': summary.get('finalCoins', ''),
            'FinalDifficulty': summary.get('finalDifficulty', ''),
            'TotalTime': summary.get('totalTime', ''),
            'Shop1Latency': latencies[0],
            'Shop2Latency': latencies[1],
            'Timestamp': summary.get('timestamp') or datetime.now(timezone.utc).isoformat(),
        }

    def export_results(self, summary):
        """
        Write the results CSV for a finished session

        Args:
            summary: Completion summary

        Returns:
            bool: True if export successful
        """
        try:
            self.save_dir.mkdir(parents=True, exist_ok=True)
            record = self.build_record(summary)
            path = self.results_path(record['SubjectID'])

            with open(path, 'w', newline='') as f:
                writer = csv.DictWriter(f, fieldnames=RESULTS_HEADERS)
                writer.writeheader()
                writer.writerow(record)

            self.last_path = path
            print(f"Results saved: {path}")
            return True

        except OSError as e:
            print(f"Export failed: {e}")
            return False
