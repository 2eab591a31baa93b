import os
import sys
import time
import numpy as np

# Add the src directory to Python path to import local dualsparse
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))


from dualsparse import Matrix, StorageOrder, NormType, SparseConfig, read_matrix_market, generate_random_vector



def print_norms(matrix: Matrix, label: str):
    print(f"One-Norm ({label}): {matrix.norm(NormType.ONE)}")
    print(f"Infinity-Norm ({label}): {matrix.norm(NormType.INFINITY)}")
    print(f"Frobenius-Norm ({label}): {matrix.norm(NormType.FROBENIUS)}")


def small_matrix_demo():
    print("=== Small matrix stored in row ordering ===")
    A = Matrix(5, 3, order=StorageOrder.ROW_MAJOR)
    A[0, 0] = 1
    A[0, 2] = 3
    A[1, 0] = 4
    A[1, 1] = 5
    A[2, 1] = 8
    A[2, 2] = 6
    A[3, 1] = 1
    A[4, 0] = 2
    A.print()
    print_norms(A, "expanded")

    v = np.array([1.0, 2.0, 3.0])
    st = time.time()
    res = A @ v
    print(f"A*v, expanded format: {res}")
    print(f"  took: {time.time() - st} seconds")

    print("Compressing the matrix")
    A.compress()
    A.print()
    print_norms(A, "packed")

    st = time.time()
    res = A @ v
    print(f"A*v, packed format: {res}")
    print(f"  took: {time.time() - st} seconds")

    # the same vector stored as a matrix with one column
    B = Matrix(3, 1, order=StorageOrder.ROW_MAJOR)
    B[0, 0] = 1
    B[1, 0] = 2
    B[2, 0] = 3
    if A.is_packed():
        B.compress()
    st = time.time()
    res = A @ B
    print(f"A*B, packed format: {res}")
    print(f"  took: {time.time() - st} seconds")


def matrix_market_demo(fp: str):
    for order in [StorageOrder.ROW_MAJOR, StorageOrder.COLUMN_MAJOR]:
        print(f"=== Matrix Market file {fp}, {order.value} ordering ===")
        M = read_matrix_market(fp, order=order, config=SparseConfig(verbose=True))
        M.print()
        v = generate_random_vector(M, SparseConfig(seed=0))

        st = time.time()
        res_expanded = M @ v
        print(f"M*v, expanded format")
        print(f"  took: {time.time() - st} seconds")

        M.compress()
        st = time.time()
        res_packed = M @ v
        print(f"M*v, packed format")
        print(f"  took: {time.time() - st} seconds")
        print(f"max difference between formats: {np.max(np.abs(res_expanded - res_packed), initial=0.0)}")


def complex_demo():
    print("=== Complex matrix ===")
    C = Matrix(3, 3, dtype=complex)
    C[0, 0] = 1 + 2j
    C[1, 1] = 3 + 4j
    C[2, 2] = 5 + 6j
    C.print()

    x = Matrix(3, 1, dtype=complex)
    x[0, 0] = 1 + 1j
    x[1, 0] = 2 + 2j
    x[2, 0] = 3 + 3j
    print(f"C*x: {C @ x}")
    print_norms(C, "expanded")


if __name__ == '__main__':
    small_matrix_demo()
    if len(sys.argv) > 1:
        matrix_market_demo(sys.argv[1])
    else:
        matrix_market_demo(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data', 'small.mtx'))
    complex_demo()
