from .selftest import ScenarioResult, SelfTestReport, run_all, scenario_ids

__all__ = ["ScenarioResult", "SelfTestReport", "run_all", "scenario_ids"]
