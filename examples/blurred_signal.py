import numpy as np

from cutpursuit import CutPursuitConfig, PFDRConfig, QuadraticCutPursuit
from cutpursuit.case_studies import build_blurred_path


def main():
    G, A, Y, X, _ = build_blurred_path(num_segments=4, segment_length=15, noise=0.02)
    cfg = CutPursuitConfig(pfdr=PFDRConfig(rho=1.2, dif_rcd=1e-3, dif_tol=1e-6), verbosity=0)

    # premultiplying once keeps every reduced problem independent of the number of observations
    driver = QuadraticCutPursuit(cfg)
    result = driver.run(A.T @ Y, graph=G, A=A.T @ A, premultiplied=True, edge_weights=0.02)
    print("components:", result.num_components)
    print("relative error:", np.linalg.norm(result.X - X) / np.linalg.norm(X))


if __name__ == "__main__":
    main()
