import os
import sys

sys.path.insert(0, os.path.dirname(__file__))

from generators.statement_generator import generate_all_statement_pdfs


def main():
    output_dir = os.path.join(os.path.dirname(__file__), "data", "generated_pdfs")
    os.makedirs(output_dir, exist_ok=True)

    print("=" * 60)
    print("Generating Bank Account Statement PDFs")
    print("=" * 60)

    print("\n[1/2] Generating HDFC Statements (5 PDFs)...")
    hdfc_metadata = generate_all_statement_pdfs(output_dir, "HDFC")
    print(f"Generated {len(hdfc_metadata)} HDFC PDFs")

    print("\n[2/2] Generating ICICI Statements (5 PDFs)...")
    icici_metadata = generate_all_statement_pdfs(output_dir, "ICICI")
    print(f"Generated {len(icici_metadata)} ICICI PDFs")

    print("\n" + "=" * 60)
    print(f"Total PDFs Generated: {len(hdfc_metadata) + len(icici_metadata)}")
    print(f"Output Directory: {output_dir}")
    print("=" * 60)


if __name__ == "__main__":
    main()
