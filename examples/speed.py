from pivotframe import CenteredRigidTransform, EulerConvention
import timeit
import numpy as np


if __name__ == "__main__":
    N = 100_000
    center = np.array([64.0, 64.0, 32.0])
    parameters = np.array([0.1, -0.2, 0.3, 1.0, 2.0, 3.0])

    t = CenteredRigidTransform(center=center)
    t.set_parameters(parameters)  # warmup, compiles the kernels
    t.inverse()
    t.jacobian(center)

    print("creation: ", timeit.timeit(lambda: CenteredRigidTransform(), number=N))
    print("set parameters: ", timeit.timeit(lambda: t.set_parameters(parameters), number=N))
    print("get parameters: ", timeit.timeit(lambda: t.get_parameters(), number=N))
    print("set center: ", timeit.timeit(lambda: t.set_center(center), number=N))
    print("inverse: ", timeit.timeit(lambda: t.inverse(), number=N))
    print("jacobian: ", timeit.timeit(lambda: t.jacobian(center), number=N))

    t.convention = EulerConvention.ZYX
    print("set parameters zyx: ", timeit.timeit(lambda: t.set_parameters(parameters), number=N))

    # a 128^3 grid of voxel centers
    grid = np.stack(np.meshgrid(*(np.arange(128.0),) * 3, indexing="ij"), axis=-1).reshape(-1, 3)
    print("transform 2M points: ", timeit.timeit(lambda: t.transform_point(grid), number=3) / 3)
