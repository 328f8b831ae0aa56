from cutpursuit import CutPursuitConfig, run_cut_pursuit
from cutpursuit.case_studies import build_piecewise_path
from cutpursuit.evaluation.metrics import ari_sklearn


def main():
    G, Y, X, labels = build_piecewise_path(num_segments=5, segment_length=40, noise=0.15)
    cfg = CutPursuitConfig(dif_tol=1e-4, it_max=15, compute_objective=True, verbosity=0)
    result = run_cut_pursuit(Y, graph=G, edge_weights=0.8, l1_weights=0.01, low_bnd=-1.0, upp_bnd=1.0, config=cfg)
    for record in result.records:
        print(record.iteration, record.num_components, record.objective)
    print("components:", result.num_components)
    print("ARI:", ari_sklearn(labels, result.comp_assign))


if __name__ == "__main__":
    main()
